# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point for ``cargo kcov``."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Final

import typer

from .. import runner
from ..config import KcovSettings, TargetSelection
from ..diagnostics import Diagnostic, open_diagnostic_stream, report
from ..kcov import INSTALL_KCOV_SCRIPT
from .options import (
    BIN_OPTION,
    COLOR_OPTION,
    COVERALLS_OPTION,
    FEATURES_OPTION,
    KCOV_OPTION,
    LIB_OPTION,
    MANIFEST_PATH_OPTION,
    NO_CLEAN_REBUILD_OPTION,
    NO_DEFAULT_FEATURES_OPTION,
    OUTPUT_OPTION,
    PRINT_INSTALL_OPTION,
    TEST_OPTION,
    VERBOSE_OPTION,
)

PROG_NAME: Final[str] = "cargo kcov"
SUBCOMMAND_NAME: Final[str] = "kcov"

app = typer.Typer(
    help="Generate and show code coverage using kcov.",
    add_completion=False,
    no_args_is_help=False,
)


@app.command()
def kcov_command(
    lib: LIB_OPTION = False,
    bins: BIN_OPTION = None,
    tests: TEST_OPTION = None,
    features: FEATURES_OPTION = None,
    no_default_features: NO_DEFAULT_FEATURES_OPTION = False,
    manifest_path: MANIFEST_PATH_OPTION = None,
    output: OUTPUT_OPTION = None,
    kcov: KCOV_OPTION = None,
    coveralls: COVERALLS_OPTION = False,
    no_clean_rebuild: NO_CLEAN_REBUILD_OPTION = False,
    print_install_kcov_sh: PRINT_INSTALL_OPTION = False,
    verbose: VERBOSE_OPTION = False,
    color: COLOR_OPTION = None,
) -> None:
    """Collect coverage of the package's tests with kcov."""

    if print_install_kcov_sh:
        typer.echo(INSTALL_KCOV_SCRIPT, nl=False)
        raise typer.Exit(code=0)

    settings = KcovSettings.from_environment(
        kcov=kcov,
        manifest_path=manifest_path,
        output=output,
        targets=TargetSelection(
            lib=lib,
            bins=tuple(bins or ()),
            tests=tuple(tests or ()),
            features=features,
            no_default_features=no_default_features,
        ),
        coveralls=coveralls,
        clean_rebuild=not no_clean_rebuild,
        verbose=verbose,
        use_color=color,
    )
    try:
        runner.run(settings)
    except Diagnostic as diagnostic:
        report(diagnostic, open_diagnostic_stream(color=settings.use_color))


def main(argv: Sequence[str] | None = None) -> None:
    """Run the CLI, dropping the ``kcov`` argument cargo inserts for subcommands.

    Args:
        argv: Arguments excluding the program name; defaults to ``sys.argv[1:]``.
    """

    args = list(sys.argv[1:] if argv is None else argv)
    if args[:1] == [SUBCOMMAND_NAME]:
        args = args[1:]
    app(args=args, prog_name=PROG_NAME)


__all__ = ["app", "kcov_command", "main"]
