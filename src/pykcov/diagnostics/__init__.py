# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fatal diagnostics: the variant model, conversions and the renderer."""

from __future__ import annotations

from .convert import converting, decode_output, from_decode_error, from_parse_error
from .model import (
    AnyDiagnostic,
    BuildInvocationFailed,
    BuildSubcommandFailed,
    CoverageToolFailed,
    DecodeFailure,
    Diagnostic,
    ExitStatus,
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
from .render import DIAGNOSTIC_EXIT_CODE, render, report
from .stream import AnsiStream, Attr, Color, StyledStream, open_diagnostic_stream

__all__ = [
    "DIAGNOSTIC_EXIT_CODE",
    "AnsiStream",
    "AnyDiagnostic",
    "Attr",
    "BuildInvocationFailed",
    "BuildSubcommandFailed",
    "Color",
    "CoverageToolFailed",
    "DecodeFailure",
    "Diagnostic",
    "ExitStatus",
    "MissingUploadCredential",
    "NoTestTargetsFound",
    "OutputDirectoryCreationFailed",
    "StructuredDataParseFailed",
    "StyledStream",
    "TextDecodingFailed",
    "ToolNotInstalled",
    "ToolTooOld",
    "UnsupportedPlatform",
    "cause",
    "converting",
    "decode_output",
    "description",
    "from_decode_error",
    "from_parse_error",
    "open_diagnostic_stream",
    "render",
    "report",
]
