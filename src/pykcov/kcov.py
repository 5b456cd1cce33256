# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""kcov probing, execution and installation helpers."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from .cargo import TestTarget
from .config import MINIMUM_KCOV_VERSION, KcovSettings
from .diagnostics import (
    CoverageToolFailed,
    ToolNotInstalled,
    ToolTooOld,
    UnsupportedPlatform,
    decode_output,
)
from .logging import debug_command
from .platform import HostPlatform, detect_host_platform
from .process import exit_status, run_command

MERGED_REPORT_NAME: Final[str] = "merged"
_VERSION_RE: Final[re.Pattern[str]] = re.compile(r"(\d+)")

INSTALL_KCOV_SCRIPT: Final[str] = """\
#!/bin/sh
set -e
CARGO_BIN="${CARGO_HOME:-$HOME/.cargo}/bin"
WORKDIR="$(mktemp -d)"
cd "$WORKDIR"
curl -L -o kcov.tar.gz https://github.com/SimonKagstrom/kcov/archive/master.tar.gz
tar xzf kcov.tar.gz
cd kcov-master
mkdir build
cd build
cmake -DCMAKE_BUILD_TYPE=RelWithDebInfo ..
make
mkdir -p "$CARGO_BIN"
cp src/kcov "$CARGO_BIN/kcov"
cd /
rm -rf "$WORKDIR"
"""


def ensure_supported_platform(host: HostPlatform | None = None) -> None:
    """Reject platforms on which kcov cannot run.

    Raises:
        UnsupportedPlatform: On Windows hosts.
    """

    if (host or detect_host_platform()) is HostPlatform.WINDOWS:
        raise UnsupportedPlatform()


def parse_version(text: str) -> int | None:
    """Return the major version number in ``kcov --version`` output, if any.

    Args:
        text: Output such as ``kcov 38`` or ``kcov v30-7-g1d7e``.

    Returns:
        int | None: First number found in ``text``.
    """

    match = _VERSION_RE.search(text)
    return int(match.group(1)) if match else None


def probe_version(settings: KcovSettings) -> int:
    """Check that kcov is installed and recent enough.

    Args:
        settings: Run settings naming the kcov executable.

    Returns:
        int: Detected kcov major version.

    Raises:
        ToolNotInstalled: If kcov cannot be launched.
        ToolTooOld: If kcov rejects ``--version`` or reports an older release.
    """

    command = [settings.kcov, "--version"]
    debug_command(command, enabled=settings.verbose, use_color=settings.use_color)
    try:
        completed = run_command(command, capture_output=True)
    except OSError as exc:
        raise ToolNotInstalled(exc) from exc
    if not exit_status(completed).success:
        raise ToolTooOld()
    version = parse_version(decode_output(completed.stdout or b""))
    if version is None or version < MINIMUM_KCOV_VERSION:
        raise ToolTooOld()
    return version


def _run_kcov(command: Sequence[str], settings: KcovSettings) -> None:
    debug_command(command, enabled=settings.verbose, use_color=settings.use_color)
    try:
        completed = run_command(command, cwd=settings.project_root)
    except OSError as exc:
        raise CoverageToolFailed(exc) from exc
    status = exit_status(completed)
    if not status.success:
        raise CoverageToolFailed(status)


def run_coverage(settings: KcovSettings, target: TestTarget, output_dir: Path) -> Path:
    """Run ``target`` under kcov.

    Args:
        settings: Run settings.
        target: Test executable to instrument.
        output_dir: Directory receiving per-target reports.

    Returns:
        Path: Directory holding the report for ``target``.

    Raises:
        CoverageToolFailed: If kcov cannot be run or exits unsuccessfully.
    """

    report_dir = output_dir / f"kcov-{target.executable.name}"
    command = [
        settings.kcov,
        "--verify",
        f"--include-path={settings.project_root}",
        "--exclude-pattern=/.cargo",
        str(report_dir),
        str(target.executable),
    ]
    _run_kcov(command, settings)
    return report_dir


def merge_reports(
    settings: KcovSettings,
    output_dir: Path,
    reports: Sequence[Path],
    *,
    coveralls_id: str | None = None,
) -> Path:
    """Merge per-target reports into one.

    The Coveralls upload happens here, once, for the merged data.

    Args:
        settings: Run settings.
        output_dir: Directory receiving the merged report.
        reports: Per-target report directories.
        coveralls_id: Travis job id forwarded to kcov for Coveralls upload.

    Returns:
        Path: Merged report directory.

    Raises:
        CoverageToolFailed: If kcov cannot be run or exits unsuccessfully.
    """

    merged = output_dir / MERGED_REPORT_NAME
    command = [settings.kcov, "--merge"]
    if coveralls_id is not None:
        command.append(f"--coveralls-id={coveralls_id}")
    command.extend((str(merged), *map(str, reports)))
    _run_kcov(command, settings)
    return merged


__all__ = [
    "INSTALL_KCOV_SCRIPT",
    "ensure_supported_platform",
    "merge_reports",
    "parse_version",
    "probe_version",
    "run_coverage",
]
