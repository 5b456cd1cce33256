# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render diagnostics to a styled stream and terminate the process."""

from __future__ import annotations

import sys
from typing import Final, NoReturn, assert_never, cast

from ..platform import HostPlatform, detect_host_platform
from .model import (
    AnyDiagnostic,
    BuildInvocationFailed,
    BuildSubcommandFailed,
    CoverageToolFailed,
    Diagnostic,
    MissingUploadCredential,
    NoTestTargetsFound,
    OutputDirectoryCreationFailed,
    StructuredDataParseFailed,
    TextDecodingFailed,
    ToolNotInstalled,
    ToolTooOld,
    UnsupportedPlatform,
    cause,
    description,
)
from .stream import Attr, Color, StyledStream, open_diagnostic_stream

DIAGNOSTIC_EXIT_CODE: Final[int] = 2
INSTALL_GUIDE_URL: Final[str] = "https://users.rust-lang.org/t/650"
INSTALL_KCOV_COMMAND: Final[str] = "cargo kcov --print-install-kcov-sh | sh"
SYSTEM_PACKAGE_COMMANDS: Final[dict[HostPlatform, tuple[str, ...]]] = {
    HostPlatform.LINUX: (
        "sudo apt-get install cmake g++ pkg-config jq",
        "sudo apt-get install libcurl4-openssl-dev libelf-dev libdw-dev binutils-dev libiberty-dev",
    ),
    HostPlatform.MACOS: ("brew install cmake jq",),
}
CLEAN_REBUILD_COMMAND: Final[str] = (
    "cargo clean &&\n"
    '        RUSTFLAGS="-C link-dead-code" cargo test --no-run &&\n'
    "        cargo kcov --no-clean-rebuild"
)
_PROMPT: Final[bytes] = b"    $ "


def _label(stream: StyledStream, text: str, color: Color) -> None:
    stream.fg(color)
    stream.attr(Attr.BOLD)
    stream.write(f"{text}: ".encode())
    stream.reset()


def _line(stream: StyledStream, text: str) -> None:
    stream.write(f"{text}\n".encode())


def _command(stream: StyledStream, command: str, *, trailing_blank: bool) -> None:
    stream.fg(Color.WHITE)
    stream.write(_PROMPT)
    stream.reset()
    _line(stream, f"{command}\n" if trailing_blank else command)


def _write_install_note(stream: StyledStream, host: HostPlatform) -> None:
    _label(stream, "note", Color.GREEN)
    stream.write(b"you may follow ")
    stream.attr(Attr.UNDERLINE)
    stream.write(INSTALL_GUIDE_URL.encode())
    stream.reset()
    stream.write(b" to install kcov:\n\n")
    for command in SYSTEM_PACKAGE_COMMANDS.get(host, ()):
        _command(stream, command, trailing_blank=True)
    _command(stream, INSTALL_KCOV_COMMAND, trailing_blank=False)


def _write_rebuild_note(stream: StyledStream) -> None:
    _label(stream, "note", Color.GREEN)
    stream.write(b"try a clean rebuild first:\n\n")
    _command(stream, CLEAN_REBUILD_COMMAND, trailing_blank=True)


def render(diagnostic: Diagnostic, stream: StyledStream, *, host: HostPlatform | None = None) -> None:
    """Write ``diagnostic`` to ``stream`` as headline, notes, cause and remediation.

    Args:
        diagnostic: Diagnostic to render.
        stream: Styled stream receiving the output.
        host: Platform whose installation guidance is shown; detected when omitted.
    """

    diagnostic = cast(AnyDiagnostic, diagnostic)
    _label(stream, "error", Color.RED)
    _line(stream, description(diagnostic))

    if isinstance(diagnostic, BuildSubcommandFailed):
        _label(stream, "note", Color.YELLOW)
        _line(stream, f"cargo {diagnostic.subcommand} exited with code {diagnostic.status.code_text}")
        stream.write(diagnostic.stderr)

    underlying = cause(diagnostic)
    if underlying is not None:
        _label(stream, "caused by", Color.YELLOW)
        _line(stream, str(underlying))

    match diagnostic:
        case ToolTooOld() | ToolNotInstalled():
            _write_install_note(stream, host or detect_host_platform())
        case NoTestTargetsFound():
            _write_rebuild_note(stream)
        case (
            UnsupportedPlatform()
            | BuildInvocationFailed()
            | TextDecodingFailed()
            | StructuredDataParseFailed()
            | OutputDirectoryCreationFailed()
            | BuildSubcommandFailed()
            | CoverageToolFailed()
            | MissingUploadCredential()
        ):
            pass
        case _:
            assert_never(diagnostic)


def report(
    diagnostic: Diagnostic,
    stream: StyledStream | None = None,
    *,
    host: HostPlatform | None = None,
) -> NoReturn:
    """Render ``diagnostic`` and exit the process with :data:`DIAGNOSTIC_EXIT_CODE`.

    Write failures on the stream propagate unchanged; they are not re-diagnosed.

    Args:
        diagnostic: Fatal diagnostic to report.
        stream: Destination stream; defaults to :func:`open_diagnostic_stream`.
        host: Platform whose installation guidance is shown; detected when omitted.
    """

    if stream is None:
        stream = open_diagnostic_stream()
    render(diagnostic, stream, host=host)
    stream.flush()
    sys.exit(DIAGNOSTIC_EXIT_CODE)


__all__ = [
    "CLEAN_REBUILD_COMMAND",
    "DIAGNOSTIC_EXIT_CODE",
    "INSTALL_GUIDE_URL",
    "INSTALL_KCOV_COMMAND",
    "SYSTEM_PACKAGE_COMMANDS",
    "render",
    "report",
]
