# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typer option declarations for the ``cargo kcov`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

LIB_OPTION = Annotated[bool, typer.Option("--lib", help="Test only this package's library.")]
BIN_OPTION = Annotated[
    list[str] | None,
    typer.Option("--bin", metavar="NAME", help="Test only the specified binary (repeatable)."),
]
TEST_OPTION = Annotated[
    list[str] | None,
    typer.Option("--test", metavar="NAME", help="Test only the specified integration test (repeatable)."),
]
FEATURES_OPTION = Annotated[
    str | None,
    typer.Option("--features", metavar="FEATURES", help="Space-separated list of features to also build."),
]
NO_DEFAULT_FEATURES_OPTION = Annotated[
    bool,
    typer.Option("--no-default-features", help="Do not build the `default` feature."),
]
MANIFEST_PATH_OPTION = Annotated[
    Path | None,
    typer.Option("--manifest-path", metavar="PATH", help="Path to the manifest to build tests for."),
]
OUTPUT_OPTION = Annotated[
    Path | None,
    typer.Option("--output", "-o", metavar="PATH", help="Output directory, default to [target/cov]."),
]
KCOV_OPTION = Annotated[
    str | None,
    typer.Option("--kcov", metavar="PATH", help="Path to the kcov executable (defaults to $KCOV or `kcov`)."),
]
COVERALLS_OPTION = Annotated[
    bool,
    typer.Option("--coveralls", help="Upload merged coverage data to coveralls.io from Travis CI."),
]
NO_CLEAN_REBUILD_OPTION = Annotated[
    bool,
    typer.Option("--no-clean-rebuild", help="Do not perform a clean rebuild before collecting coverage."),
]
PRINT_INSTALL_OPTION = Annotated[
    bool,
    typer.Option("--print-install-kcov-sh", help="Print a shell script that builds and installs kcov."),
]
VERBOSE_OPTION = Annotated[bool, typer.Option("--verbose", "-v", help="Echo every command before running it.")]
COLOR_OPTION = Annotated[
    bool | None,
    typer.Option("--color/--no-color", help="Force or disable coloured progress output."),
]

__all__ = [
    "BIN_OPTION",
    "COLOR_OPTION",
    "COVERALLS_OPTION",
    "FEATURES_OPTION",
    "KCOV_OPTION",
    "LIB_OPTION",
    "MANIFEST_PATH_OPTION",
    "NO_CLEAN_REBUILD_OPTION",
    "NO_DEFAULT_FEATURES_OPTION",
    "OUTPUT_OPTION",
    "PRINT_INSTALL_OPTION",
    "TEST_OPTION",
    "VERBOSE_OPTION",
]
