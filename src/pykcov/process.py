# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; we provide a controlled wrapper around
# cargo and kcov execution, normalising arguments and disabling ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path

from .diagnostics import ExitStatus


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute() or len(head_path.parts) > 1:
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    capture_output: bool = False,
) -> subprocess.CompletedProcess[bytes]:
    """Execute *args* after normalising the executable path.

    Output is captured as raw bytes; callers decide how to decode it.

    Raises:
        OSError: If the executable cannot be located or spawned.
    """

    normalized = _normalize_args(args)
    # Bandit: commands are assembled from fixed argument lists without shell expansion.
    return subprocess.run(  # nosec B603
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        check=False,
        capture_output=capture_output,
    )


def exit_status(completed: subprocess.CompletedProcess[bytes]) -> ExitStatus:
    """Return the :class:`ExitStatus` observed for ``completed``."""

    return ExitStatus(completed.returncode)


__all__ = ["exit_status", "run_command"]
