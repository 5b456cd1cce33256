# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cargo invocations: cleaning, building test binaries and locating them."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from pydantic import BaseModel, ConfigDict

from .config import KcovSettings
from .diagnostics import (
    BuildInvocationFailed,
    BuildSubcommandFailed,
    NoTestTargetsFound,
    converting,
    decode_output,
)
from .logging import debug_command
from .process import exit_status, run_command

LINK_DEAD_CODE_FLAG: Final[str] = "-C link-dead-code"
_ARTIFACT_REASON: Final[str] = "compiler-artifact"


class ArtifactProfile(BaseModel):
    """Build profile reported for a compiler artifact."""

    model_config = ConfigDict(extra="ignore")

    test: bool = False


class ArtifactTarget(BaseModel):
    """Crate target that produced a compiler artifact."""

    model_config = ConfigDict(extra="ignore")

    name: str
    kind: list[str] = []


class CargoMessage(BaseModel):
    """One line of ``cargo --message-format=json`` output."""

    model_config = ConfigDict(extra="ignore")

    reason: str
    executable: str | None = None
    profile: ArtifactProfile | None = None
    target: ArtifactTarget | None = None


@dataclass(frozen=True, slots=True)
class TestTarget:
    """Compiled test executable to run under kcov."""

    __test__ = False

    name: str
    executable: Path


def _run_cargo(
    subcommand: str,
    args: Sequence[str],
    settings: KcovSettings,
    *,
    env: Mapping[str, str] | None = None,
) -> CompletedProcess[bytes]:
    """Run cargo and translate spawn failures and non-zero exits into diagnostics.

    Raises:
        BuildInvocationFailed: If cargo cannot be spawned.
        BuildSubcommandFailed: If cargo exits unsuccessfully.
    """

    command = [settings.cargo, subcommand, *args]
    debug_command(command, enabled=settings.verbose, use_color=settings.use_color)
    try:
        completed = run_command(command, cwd=settings.project_root, env=env, capture_output=True)
    except OSError as exc:
        raise BuildInvocationFailed(exc) from exc
    status = exit_status(completed)
    if not status.success:
        raise BuildSubcommandFailed(subcommand, status, completed.stderr or b"")
    return completed


def clean(settings: KcovSettings) -> None:
    """Remove previous build artefacts with ``cargo clean``.

    Args:
        settings: Run settings selecting cargo and the manifest.
    """

    _run_cargo("clean", settings.cargo_base_args(), settings)


def build_environment(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return ``base`` (default :data:`os.environ`) with dead code linking enabled in ``RUSTFLAGS``.

    Args:
        base: Environment to extend.

    Returns:
        dict[str, str]: Environment for the test build.
    """

    env = dict(os.environ if base is None else base)
    flags = env.get("RUSTFLAGS", "")
    if LINK_DEAD_CODE_FLAG not in flags:
        env["RUSTFLAGS"] = f"{flags} {LINK_DEAD_CODE_FLAG}".strip()
    return env


def build_tests(settings: KcovSettings, *, env: Mapping[str, str] | None = None) -> bytes:
    """Compile the selected test targets without running them.

    Args:
        settings: Run settings.
        env: Base environment for cargo; defaults to :data:`os.environ`.

    Returns:
        bytes: Cargo's JSON message stream from standard output.
    """

    args = [
        "--no-run",
        "--message-format=json",
        *settings.cargo_base_args(),
        *settings.targets.cargo_args(),
    ]
    completed = _run_cargo("test", args, settings, env=build_environment(env))
    return completed.stdout or b""


def parse_test_targets(stdout: bytes) -> list[TestTarget]:
    """Extract test executables from cargo's JSON message stream.

    Args:
        stdout: Raw output of ``cargo test --no-run --message-format=json``.

    Returns:
        list[TestTarget]: Test executables in build order.

    Raises:
        TextDecodingFailed: If the output is not UTF-8.
        StructuredDataParseFailed: If a line is not a valid cargo message.
    """

    targets: list[TestTarget] = []
    text = decode_output(stdout)
    with converting():
        for line in text.splitlines():
            if not line.strip():
                continue
            message = CargoMessage.model_validate_json(line)
            if message.reason != _ARTIFACT_REASON or message.executable is None:
                continue
            if message.profile is None or not message.profile.test:
                continue
            executable = Path(message.executable)
            name = message.target.name if message.target is not None else executable.stem
            targets.append(TestTarget(name=name, executable=executable))
    return targets


def find_test_targets(settings: KcovSettings, *, env: Mapping[str, str] | None = None) -> list[TestTarget]:
    """Build the tests and return the executables that exist on disk.

    Args:
        settings: Run settings.
        env: Base environment for cargo.

    Returns:
        list[TestTarget]: At least one test executable.

    Raises:
        NoTestTargetsFound: If cargo reported no test executables or one is missing.
    """

    targets = parse_test_targets(build_tests(settings, env=env))
    if not targets:
        raise NoTestTargetsFound()
    for target in targets:
        try:
            target.executable.stat()
        except OSError as exc:
            raise NoTestTargetsFound(exc) from exc
    return targets


__all__ = [
    "CargoMessage",
    "TestTarget",
    "build_environment",
    "build_tests",
    "clean",
    "find_test_targets",
    "parse_test_targets",
]
