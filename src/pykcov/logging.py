# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing progress messages with optional colour.

Fatal errors are not logged here; they are rendered by
:mod:`pykcov.diagnostics.render`.
"""

from __future__ import annotations

import shlex
from collections.abc import Sequence

from rich.text import Text

from .console import detect_tty, get_console_manager


def _print_line(msg: str, *, style: str | None, use_color: bool | None = None) -> None:
    """Render ``msg`` to the stderr console.

    Args:
        msg: Message text to print.
        style: Rich style name applied when colour output is active.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_color: bool | None = None) -> None:
    """Emit an informational message.

    Args:
        msg: Message text to display.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _print_line(msg, style="cyan", use_color=use_color)


def ok(msg: str, *, use_color: bool | None = None) -> None:
    """Emit a success message.

    Args:
        msg: Message text to display.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _print_line(msg, style="green", use_color=use_color)


def warn(msg: str, *, use_color: bool | None = None) -> None:
    """Emit a warning message.

    Args:
        msg: Message text to display.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    _print_line(msg, style="yellow", use_color=use_color)


def debug_command(args: Sequence[str], *, enabled: bool, use_color: bool | None = None) -> None:
    """Echo the command about to run when verbose output is enabled.

    Args:
        args: Command-line arguments of the child process.
        enabled: ``True`` when verbose output was requested.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    if enabled:
        _print_line(f"[debug] command={shlex.join(args)}", style="dim", use_color=use_color)


__all__ = ["debug_command", "info", "ok", "warn"]
