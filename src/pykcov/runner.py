# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Orchestrate one coverage run from platform checks to the merged report."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from . import cargo, kcov
from .config import COVERALLS_JOB_ENV, KcovSettings
from .diagnostics import MissingUploadCredential, OutputDirectoryCreationFailed
from .logging import info, ok, warn
from .platform import HostPlatform


def coveralls_job_id(settings: KcovSettings, env: Mapping[str, str]) -> str | None:
    """Return the Travis job id when Coveralls upload was requested.

    Raises:
        MissingUploadCredential: If upload was requested and the variable is unset.
    """

    if not settings.coveralls:
        return None
    job_id = env.get(COVERALLS_JOB_ENV)
    if not job_id:
        raise MissingUploadCredential()
    return job_id


def prepare_output_dir(path: Path) -> Path:
    """Create ``path`` and its parents.

    Raises:
        OutputDirectoryCreationFailed: If the directory cannot be created.
    """

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputDirectoryCreationFailed(exc) from exc
    return path


def run(
    settings: KcovSettings,
    *,
    env: Mapping[str, str] | None = None,
    host: HostPlatform | None = None,
) -> Path:
    """Collect coverage for the selected test targets.

    Every failure surfaces as a :class:`~pykcov.diagnostics.Diagnostic`; nothing
    is retried.

    Args:
        settings: Run settings.
        env: Process environment; defaults to :data:`os.environ`.
        host: Host platform; detected when omitted.

    Returns:
        Path: Directory of the merged coverage report.
    """

    env = os.environ if env is None else env
    kcov.ensure_supported_platform(host)
    job_id = coveralls_job_id(settings, env)
    version = kcov.probe_version(settings)
    info(f"Using kcov v{version}", use_color=settings.use_color)

    if settings.clean_rebuild:
        info("Cleaning previous build artefacts", use_color=settings.use_color)
        cargo.clean(settings)
    else:
        warn("Skipping clean rebuild; stale artefacts may lack dead-code coverage", use_color=settings.use_color)
    info("Building test executables", use_color=settings.use_color)
    targets = cargo.find_test_targets(settings, env=env)

    output_dir = prepare_output_dir(settings.output_dir)
    reports = []
    for target in targets:
        info(f"Collecting coverage for {target.name}", use_color=settings.use_color)
        reports.append(kcov.run_coverage(settings, target, output_dir))
    merged = kcov.merge_reports(settings, output_dir, reports, coveralls_id=job_id)
    ok(f"Coverage report written to {merged}", use_color=settings.use_color)
    return merged


__all__ = ["coveralls_job_id", "prepare_output_dir", "run"]
