# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for cargo invocation and test-target discovery."""

from __future__ import annotations

import json
from pathlib import Path
from subprocess import CompletedProcess

import pytest
from pydantic import ValidationError

from pykcov import cargo
from pykcov.config import KcovSettings, TargetSelection
from pykcov.diagnostics import (
    BuildInvocationFailed,
    BuildSubcommandFailed,
    NoTestTargetsFound,
    StructuredDataParseFailed,
    TextDecodingFailed,
)


def _completed(args, *, stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> CompletedProcess[bytes]:
    return CompletedProcess(args=list(args), returncode=returncode, stdout=stdout, stderr=stderr)


def _artifact(executable: Path | None, *, name: str = "demo", test: bool = True) -> str:
    return json.dumps(
        {
            "reason": "compiler-artifact",
            "package_id": "demo 0.1.0",
            "target": {"name": name, "kind": ["lib"], "src_path": "src/lib.rs"},
            "profile": {"opt_level": "0", "test": test},
            "executable": str(executable) if executable is not None else None,
            "fresh": False,
        }
    )


def _settings(tmp_path: Path, **overrides) -> KcovSettings:
    return KcovSettings(manifest_path=tmp_path / "Cargo.toml", **overrides)


def test_parse_test_targets_keeps_test_executables(tmp_path: Path) -> None:
    exe = tmp_path / "demo-1234"
    lines = [
        _artifact(exe),
        _artifact(None, name="build-script"),
        _artifact(tmp_path / "demo-bin", name="demo-bin", test=False),
        json.dumps({"reason": "build-finished", "success": True}),
        "",
    ]

    targets = cargo.parse_test_targets("\n".join(lines).encode())

    assert [(target.name, target.executable) for target in targets] == [("demo", exe)]


def test_parse_test_targets_rejects_invalid_utf8() -> None:
    with pytest.raises(TextDecodingFailed):
        cargo.parse_test_targets(b'{"reason": "\xff"}')


def test_parse_test_targets_rejects_invalid_json() -> None:
    with pytest.raises(StructuredDataParseFailed) as excinfo:
        cargo.parse_test_targets(b"Compiling demo v0.1.0\n")

    assert isinstance(excinfo.value.cause, ValidationError)


def test_build_tests_passes_target_selection_and_dead_code_flag(monkeypatch, tmp_path: Path) -> None:
    calls: list[tuple[list[str], dict[str, str] | None]] = []

    def fake_run_command(args, *, cwd=None, env=None, capture_output=False):
        calls.append((list(args), env))
        return _completed(args, stdout=b"{}")

    monkeypatch.setattr("pykcov.cargo.run_command", fake_run_command)
    settings = _settings(tmp_path, targets=TargetSelection(lib=True, tests=("smoke",), features="fast"))

    stdout = cargo.build_tests(settings, env={"RUSTFLAGS": "-D warnings"})

    assert stdout == b"{}"
    args, env = calls[0]
    assert args[:4] == ["cargo", "test", "--no-run", "--message-format=json"]
    assert args[4:] == [
        "--manifest-path",
        str((tmp_path / "Cargo.toml").resolve()),
        "--lib",
        "--test",
        "smoke",
        "--features",
        "fast",
    ]
    assert env == {"RUSTFLAGS": "-D warnings -C link-dead-code"}


def test_build_environment_does_not_duplicate_flag() -> None:
    env = cargo.build_environment({"RUSTFLAGS": "-C link-dead-code"})

    assert env["RUSTFLAGS"] == "-C link-dead-code"
    assert cargo.build_environment({})["RUSTFLAGS"] == "-C link-dead-code"


def test_cargo_spawn_failure_is_build_invocation_failure(monkeypatch, tmp_path: Path) -> None:
    def fake_run_command(args, **kwargs):
        raise FileNotFoundError("Executable 'cargo' was not found on PATH")

    monkeypatch.setattr("pykcov.cargo.run_command", fake_run_command)

    with pytest.raises(BuildInvocationFailed) as excinfo:
        cargo.clean(_settings(tmp_path))

    assert "cargo" in str(excinfo.value.cause)


def test_cargo_failure_keeps_subcommand_and_stderr(monkeypatch, tmp_path: Path) -> None:
    def fake_run_command(args, **kwargs):
        return _completed(args, stderr=b"error[E0432]: unresolved import", returncode=101)

    monkeypatch.setattr("pykcov.cargo.run_command", fake_run_command)

    with pytest.raises(BuildSubcommandFailed) as excinfo:
        cargo.find_test_targets(_settings(tmp_path), env={})

    assert excinfo.value.subcommand == "test"
    assert excinfo.value.status.returncode == 101
    assert excinfo.value.stderr == b"error[E0432]: unresolved import"


def test_find_test_targets_without_executables(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        "pykcov.cargo.run_command",
        lambda args, **kwargs: _completed(args, stdout=b'{"reason": "build-finished", "success": true}\n'),
    )

    with pytest.raises(NoTestTargetsFound) as excinfo:
        cargo.find_test_targets(_settings(tmp_path), env={})

    assert excinfo.value.cause is None


def test_find_test_targets_with_missing_executable(monkeypatch, tmp_path: Path) -> None:
    stdout = _artifact(tmp_path / "gone-1234").encode()
    monkeypatch.setattr("pykcov.cargo.run_command", lambda args, **kwargs: _completed(args, stdout=stdout))

    with pytest.raises(NoTestTargetsFound) as excinfo:
        cargo.find_test_targets(_settings(tmp_path), env={})

    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_find_test_targets_returns_existing_executables(monkeypatch, tmp_path: Path) -> None:
    exe = tmp_path / "demo-1234"
    exe.write_bytes(b"\x7fELF")
    stdout = _artifact(exe).encode()
    monkeypatch.setattr("pykcov.cargo.run_command", lambda args, **kwargs: _completed(args, stdout=stdout))

    targets = cargo.find_test_targets(_settings(tmp_path), env={})

    assert [target.executable for target in targets] == [exe]


def test_relative_manifest_resolves_from_project_root(monkeypatch, tmp_path: Path) -> None:
    project = tmp_path / "sub"
    project.mkdir()
    (project / "Cargo.toml").write_text('[package]\nname = "demo"\n')
    monkeypatch.chdir(tmp_path)
    calls: list[tuple[list[str], Path | None]] = []

    def fake_run_command(args, *, cwd=None, env=None, capture_output=False):
        calls.append((list(args), cwd))
        return _completed(args)

    monkeypatch.setattr("pykcov.cargo.run_command", fake_run_command)

    cargo.clean(KcovSettings(manifest_path=Path("sub/Cargo.toml")))

    args, cwd = calls[0]
    manifest = Path(args[args.index("--manifest-path") + 1])
    assert cwd == project.resolve()
    assert manifest.is_absolute()
    assert (cwd / manifest).is_file()
