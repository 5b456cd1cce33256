# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the ``cargo kcov`` command line."""

from __future__ import annotations

import importlib
import io
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pykcov.cli.app import app, main
from pykcov.config import KcovSettings
from pykcov.diagnostics import AnsiStream, BuildSubcommandFailed, ExitStatus, MissingUploadCredential
from pykcov.kcov import INSTALL_KCOV_SCRIPT

# ``pykcov.cli`` re-exports the Typer ``app``, shadowing the submodule in dotted lookups.
cli_app = importlib.import_module("pykcov.cli.app")


@pytest.fixture
def diagnostic_sink(monkeypatch) -> io.BytesIO:
    """Route rendered diagnostics into an in-memory buffer honouring the requested colour."""
    sink = io.BytesIO()

    def fake_open(*, color=None):
        return AnsiStream(sink, color=bool(color))

    monkeypatch.setattr(cli_app, "open_diagnostic_stream", fake_open)
    return sink


def test_print_install_script() -> None:
    result = CliRunner().invoke(app, ["--print-install-kcov-sh"])

    assert result.exit_code == 0
    assert result.stdout == INSTALL_KCOV_SCRIPT


def test_options_build_settings(monkeypatch, tmp_path: Path) -> None:
    captured: list[KcovSettings] = []
    monkeypatch.setattr(cli_app.runner, "run", lambda settings: captured.append(settings))
    monkeypatch.delenv("KCOV", raising=False)

    result = CliRunner().invoke(
        app,
        [
            "--lib",
            "--test",
            "smoke",
            "--features",
            "fast",
            "--manifest-path",
            str(tmp_path / "Cargo.toml"),
            "-o",
            str(tmp_path / "cov"),
            "--coveralls",
            "--no-clean-rebuild",
            "-v",
        ],
    )

    assert result.exit_code == 0, result.output
    settings = captured[0]
    assert settings.kcov == "kcov"
    assert settings.output == tmp_path / "cov"
    assert settings.coveralls is True
    assert settings.clean_rebuild is False
    assert settings.verbose is True
    assert settings.targets.cargo_args() == ["--lib", "--test", "smoke", "--features", "fast"]


def test_diagnostic_is_rendered_with_exit_code_two(monkeypatch, diagnostic_sink: io.BytesIO) -> None:
    def fail(settings):
        raise MissingUploadCredential()

    monkeypatch.setattr(cli_app.runner, "run", fail)

    result = CliRunner().invoke(app, ["--coveralls"])

    assert result.exit_code == 2
    assert diagnostic_sink.getvalue() == b"error: missing environment variable TRAVIS_JOB_ID for coveralls\n"


@pytest.mark.parametrize(
    ("flag", "expected"),
    [
        ("--no-color", b"error: missing environment variable TRAVIS_JOB_ID for coveralls\n"),
        ("--color", b"\x1b[31m\x1b[1merror: \x1b[0mmissing environment variable"),
    ],
)
def test_color_flag_applies_to_diagnostics(
    monkeypatch, diagnostic_sink: io.BytesIO, flag: str, expected: bytes
) -> None:
    def fail(settings):
        raise MissingUploadCredential()

    monkeypatch.setattr(cli_app.runner, "run", fail)

    result = CliRunner().invoke(app, ["--coveralls", flag])

    assert result.exit_code == 2
    assert diagnostic_sink.getvalue().startswith(expected)


def test_cargo_failure_output_is_forwarded(monkeypatch, diagnostic_sink: io.BytesIO) -> None:
    def fail(settings):
        raise BuildSubcommandFailed("test", ExitStatus(101), b"error[E0432]")

    monkeypatch.setattr(cli_app.runner, "run", fail)

    result = CliRunner().invoke(app, [])

    assert result.exit_code == 2
    assert diagnostic_sink.getvalue().endswith(b"note: cargo test exited with code 101\nerror[E0432]")


def test_main_drops_cargo_subcommand_name(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["kcov", "--print-install-kcov-sh"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out == INSTALL_KCOV_SCRIPT
