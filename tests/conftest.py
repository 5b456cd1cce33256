# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import io

import pytest

from pykcov.console import get_console_manager
from pykcov.diagnostics import AnsiStream


@pytest.fixture
def buffer() -> io.BytesIO:
    """Return the in-memory sink shared by the stream fixtures."""
    return io.BytesIO()


@pytest.fixture
def plain_stream(buffer: io.BytesIO) -> AnsiStream:
    """Return a colourless diagnostic stream writing into ``buffer``."""
    return AnsiStream(buffer, color=False)


@pytest.fixture
def color_stream(buffer: io.BytesIO) -> AnsiStream:
    """Return a diagnostic stream writing ANSI codes into ``buffer``."""
    return AnsiStream(buffer, color=True)


@pytest.fixture(autouse=True)
def _fresh_consoles() -> None:
    """Rebind progress consoles to the stderr captured by each test."""
    get_console_manager().reset()
