# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Byte-oriented styled output used to render diagnostics."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

import sys
from enum import StrEnum
from typing import BinaryIO, Final, Protocol, runtime_checkable

from rich.console import Console


class Color(StrEnum):
    """Foreground colours used by the renderer."""

    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    WHITE = "white"


class Attr(StrEnum):
    """Text attributes used by the renderer."""

    BOLD = "bold"
    UNDERLINE = "underline"


ANSI: Final[dict[str, bytes]] = {
    "reset": b"\033[0m",
    Attr.BOLD: b"\033[1m",
    Attr.UNDERLINE: b"\033[4m",
    Color.RED: b"\033[31m",
    Color.GREEN: b"\033[32m",
    Color.YELLOW: b"\033[33m",
    Color.WHITE: b"\033[37m",
}


@runtime_checkable
class StyledStream(Protocol):
    """Minimal terminal capability consumed by the diagnostic renderer."""

    def write(self, data: bytes) -> None:
        """Write ``data`` verbatim."""

        raise NotImplementedError

    def fg(self, color: Color) -> None:
        """Set the foreground colour for subsequent writes."""

        raise NotImplementedError

    def attr(self, attr: Attr) -> None:
        """Enable ``attr`` for subsequent writes."""

        raise NotImplementedError

    def reset(self) -> None:
        """Restore default colour and attributes."""

        raise NotImplementedError

    def flush(self) -> None:
        """Push buffered output to the underlying device."""

        raise NotImplementedError


class AnsiStream:
    """Write diagnostics to a binary sink, emitting ANSI SGR codes when colour is enabled."""

    def __init__(self, sink: BinaryIO, *, color: bool) -> None:
        """Bind the stream to ``sink``.

        Args:
            sink: Binary file-like object receiving output.
            color: ``True`` to emit ANSI escape sequences for styling calls.
        """

        self._sink = sink
        self.color = color

    def write(self, data: bytes) -> None:
        """Write ``data`` verbatim and flush.

        Args:
            data: Raw bytes; never decoded or re-encoded.
        """

        self._sink.write(data)
        self._sink.flush()

    def fg(self, color: Color) -> None:
        """Select ``color`` as the foreground colour.

        Args:
            color: Colour applied until the next :meth:`reset`.
        """

        self._escape(ANSI[color])

    def attr(self, attr: Attr) -> None:
        """Enable ``attr`` until the next :meth:`reset`.

        Args:
            attr: Attribute to enable.
        """

        self._escape(ANSI[attr])

    def reset(self) -> None:
        """Restore the terminal's default style."""

        self._escape(ANSI["reset"])

    def flush(self) -> None:
        """Flush the underlying sink."""

        self._sink.flush()

    def _escape(self, code: bytes) -> None:
        if self.color:
            self.write(code)


def supports_color(console: Console | None = None) -> bool:
    """Return ``True`` when stderr is a terminal that accepts colour output.

    Args:
        console: Optional rich console to probe; defaults to one bound to stderr.

    Returns:
        bool: Whether ANSI styling should be emitted.
    """

    console = console or Console(stderr=True)
    return console.is_terminal and not console.no_color and console.color_system is not None


def open_diagnostic_stream(*, color: bool | None = None) -> AnsiStream:
    """Return the process-wide diagnostic stream bound to standard error.

    Args:
        color: Force styling on or off; detected from stderr when ``None``.

    Returns:
        AnsiStream: Stream writing to ``sys.stderr.buffer``.
    """

    sys.stderr.flush()
    return AnsiStream(sys.stderr.buffer, color=supports_color() if color is None else color)


__all__ = [
    "ANSI",
    "AnsiStream",
    "Attr",
    "Color",
    "StyledStream",
    "open_diagnostic_stream",
    "supports_color",
]
