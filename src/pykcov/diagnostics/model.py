# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Closed set of fatal diagnostics raised while driving cargo and kcov.

Every failure the wrapper can hit maps onto exactly one subclass of
:class:`Diagnostic`. The module-level :func:`description` and :func:`cause`
helpers match exhaustively over :data:`AnyDiagnostic`, so adding a variant
without updating them is reported by the type checker through
:func:`typing.assert_never`.
"""

from __future__ import annotations

import signal
from dataclasses import dataclass
from json import JSONDecodeError
from typing import TypeAlias, assert_never, cast

from pydantic import ValidationError

ParseError: TypeAlias = JSONDecodeError | ValidationError


@dataclass(frozen=True, slots=True)
class ExitStatus:
    """Observed termination state of a child process.

    Attributes:
        returncode: Value reported by :mod:`subprocess`; negative values mean the
            process was terminated by that signal number.
    """

    returncode: int

    @property
    def success(self) -> bool:
        """Return ``True`` when the process exited with status zero."""

        return self.returncode == 0

    @property
    def signal(self) -> int | None:
        """Return the terminating signal number, if any."""

        return -self.returncode if self.returncode < 0 else None

    @property
    def code_text(self) -> str:
        """Return the bare exit code, or the signal description for killed processes."""

        if self.signal is None:
            return str(self.returncode)
        return f"signal {self.signal}{self._signal_suffix()}"

    def _signal_suffix(self) -> str:
        try:
            return f" ({signal.Signals(self.signal).name})"
        except ValueError:
            return ""

    def __str__(self) -> str:
        if self.signal is None:
            return f"exit status: {self.returncode}"
        return f"signal: {self.signal}{self._signal_suffix()}"


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """Position detail of a failed UTF-8 decode, without the undecoded buffer.

    Attributes:
        encoding: Codec that rejected the input.
        start: Offset of the first invalid byte.
        end: Offset one past the last invalid byte.
        reason: Codec-supplied reason such as ``invalid start byte``.
        message: Display text of the original :class:`UnicodeDecodeError`.
    """

    encoding: str
    start: int
    end: int
    reason: str
    message: str

    @classmethod
    def from_exception(cls, exc: UnicodeDecodeError) -> DecodeFailure:
        """Capture the position detail of ``exc``.

        Args:
            exc: Decode error raised by :meth:`bytes.decode`.

        Returns:
            DecodeFailure: Record whose display text matches ``str(exc)``.
        """

        return cls(
            encoding=exc.encoding,
            start=exc.start,
            end=exc.end,
            reason=exc.reason,
            message=str(exc),
        )

    def __str__(self) -> str:
        return self.message


class Diagnostic(Exception):
    """Base class of every fatal failure reported to the user.

    Only the concrete variants are instantiated. Their constructor arguments are
    kept in ``args`` so diagnostics survive :mod:`copy` and :mod:`pickle`.
    """

    def __init__(self, *payload: object) -> None:
        if type(self) is Diagnostic:
            msg = "Diagnostic is abstract; raise one of its variants"
            raise TypeError(msg)
        super().__init__(*payload)

    def __str__(self) -> str:
        return self.description

    def __reduce__(self) -> tuple[type[Diagnostic], tuple[object, ...]]:
        return type(self), self.args

    @property
    def description(self) -> str:
        """Return the fixed summary line for this diagnostic."""

        return description(cast(AnyDiagnostic, self))

    @property
    def cause(self) -> object | None:
        """Return the lower-level error explaining this diagnostic, if any."""

        return cause(cast(AnyDiagnostic, self))


class UnsupportedPlatform(Diagnostic):
    """The host operating system cannot run kcov."""


class ToolTooOld(Diagnostic):
    """kcov is installed but older than the minimum supported release."""


class ToolNotInstalled(Diagnostic):
    """Locating or launching kcov failed."""

    def __init__(self, error: OSError) -> None:
        self.error = error
        super().__init__(error)


class BuildInvocationFailed(Diagnostic):
    """The cargo process could not be spawned."""

    def __init__(self, error: OSError) -> None:
        self.error = error
        super().__init__(error)


class TextDecodingFailed(Diagnostic):
    """Subprocess output was not valid UTF-8."""

    def __init__(self, error: DecodeFailure) -> None:
        self.error = error
        super().__init__(error)


class StructuredDataParseFailed(Diagnostic):
    """JSON output could not be parsed; ``error`` is ``None`` when no parser error exists."""

    def __init__(self, error: ParseError | None = None) -> None:
        self.error = error
        super().__init__(error)


class OutputDirectoryCreationFailed(Diagnostic):
    """The coverage report directory could not be created."""

    def __init__(self, error: OSError) -> None:
        self.error = error
        super().__init__(error)


class BuildSubcommandFailed(Diagnostic):
    """A cargo subcommand ran but exited unsuccessfully.

    Attributes:
        subcommand: Cargo subcommand name, e.g. ``test``.
        status: Exit status reported for the subcommand.
        stderr: Captured standard error, kept as raw bytes.
    """

    def __init__(self, subcommand: str, status: ExitStatus, stderr: bytes) -> None:
        self.subcommand = subcommand
        self.status = status
        self.stderr = bytes(stderr)
        super().__init__(subcommand, status, self.stderr)


class CoverageToolFailed(Diagnostic):
    """kcov could not be waited on (``OSError``) or exited with a failing status."""

    def __init__(self, outcome: OSError | ExitStatus) -> None:
        self.outcome = outcome
        super().__init__(outcome)


class MissingUploadCredential(Diagnostic):
    """Coveralls upload was requested without ``TRAVIS_JOB_ID``."""


class NoTestTargetsFound(Diagnostic):
    """No compiled test executables could be enumerated."""

    def __init__(self, error: OSError | None = None) -> None:
        self.error = error
        super().__init__(error)


AnyDiagnostic: TypeAlias = (
    UnsupportedPlatform
    | ToolTooOld
    | ToolNotInstalled
    | BuildInvocationFailed
    | TextDecodingFailed
    | StructuredDataParseFailed
    | OutputDirectoryCreationFailed
    | BuildSubcommandFailed
    | CoverageToolFailed
    | MissingUploadCredential
    | NoTestTargetsFound
)


def description(diagnostic: AnyDiagnostic) -> str:
    """Return the fixed, human-readable summary of ``diagnostic``.

    Args:
        diagnostic: Diagnostic to describe.

    Returns:
        str: Variant-specific summary, independent of the payload.
    """

    match diagnostic:
        case UnsupportedPlatform():
            return "kcov cannot collect coverage on Windows."
        case ToolTooOld():
            return "kcov is too old. v30 or above is required."
        case ToolNotInstalled():
            return "kcov not installed."
        case BuildInvocationFailed():
            return "cannot run cargo"
        case TextDecodingFailed():
            return "output is not UTF-8 encoded"
        case StructuredDataParseFailed():
            return "cannot parse JSON"
        case BuildSubcommandFailed():
            return "cargo subcommand failure"
        case OutputDirectoryCreationFailed():
            return "cannot create coverage output directory"
        case CoverageToolFailed():
            return "failed to get coverage"
        case MissingUploadCredential():
            return "missing environment variable TRAVIS_JOB_ID for coveralls"
        case NoTestTargetsFound():
            return "cannot find test targets"
        case _:
            assert_never(diagnostic)


def cause(diagnostic: AnyDiagnostic) -> object | None:
    """Return the displayable lower-level error behind ``diagnostic``.

    Args:
        diagnostic: Diagnostic to inspect.

    Returns:
        object | None: Wrapped error, or ``None`` when the variant carries none
        or its optional payload was not supplied.
    """

    match diagnostic:
        case (
            ToolNotInstalled(error=error)
            | BuildInvocationFailed(error=error)
            | OutputDirectoryCreationFailed(error=error)
        ):
            return error
        case TextDecodingFailed(error=decode_error):
            return decode_error
        case StructuredDataParseFailed(error=parse_error):
            return parse_error
        case CoverageToolFailed(outcome=outcome):
            return outcome
        case NoTestTargetsFound(error=discovery_error):
            return discovery_error
        case UnsupportedPlatform() | ToolTooOld() | MissingUploadCredential() | BuildSubcommandFailed():
            return None
        case _:
            assert_never(diagnostic)


__all__ = [
    "AnyDiagnostic",
    "BuildInvocationFailed",
    "BuildSubcommandFailed",
    "CoverageToolFailed",
    "DecodeFailure",
    "Diagnostic",
    "ExitStatus",
    "MissingUploadCredential",
    "NoTestTargetsFound",
    "OutputDirectoryCreationFailed",
    "ParseError",
    "StructuredDataParseFailed",
    "TextDecodingFailed",
    "ToolNotInstalled",
    "ToolTooOld",
    "UnsupportedPlatform",
    "cause",
    "description",
]
