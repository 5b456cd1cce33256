# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host platform detection."""

from __future__ import annotations

import sys
from enum import StrEnum


class HostPlatform(StrEnum):
    """Platforms with distinct kcov support and installation guidance."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    OTHER = "other"


def detect_host_platform(name: str | None = None) -> HostPlatform:
    """Classify ``name`` (default :data:`sys.platform`) as a :class:`HostPlatform`.

    Args:
        name: Platform identifier in :data:`sys.platform` format.

    Returns:
        HostPlatform: Detected platform family.
    """

    name = sys.platform if name is None else name
    if name.startswith("linux"):
        return HostPlatform.LINUX
    if name == "darwin":
        return HostPlatform.MACOS
    if name in {"win32", "cygwin", "msys"}:
        return HostPlatform.WINDOWS
    return HostPlatform.OTHER


__all__ = ["HostPlatform", "detect_host_platform"]
