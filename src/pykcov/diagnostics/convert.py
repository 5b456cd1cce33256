# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Conversions from lower-level decode and parse failures into diagnostics."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from json import JSONDecodeError

from pydantic import ValidationError

from .model import DecodeFailure, ParseError, StructuredDataParseFailed, TextDecodingFailed


def from_decode_error(exc: UnicodeDecodeError) -> TextDecodingFailed:
    """Wrap ``exc`` as :class:`TextDecodingFailed`, dropping the undecoded buffer.

    Args:
        exc: Error raised while decoding subprocess output.

    Returns:
        TextDecodingFailed: Diagnostic whose cause displays like ``exc``.
    """

    return TextDecodingFailed(DecodeFailure.from_exception(exc))


def from_parse_error(exc: ParseError) -> StructuredDataParseFailed:
    """Wrap a JSON or model validation error as :class:`StructuredDataParseFailed`.

    Args:
        exc: Error raised by :mod:`json` or by pydantic while parsing JSON.

    Returns:
        StructuredDataParseFailed: Diagnostic carrying ``exc`` as its cause.
    """

    return StructuredDataParseFailed(exc)


def decode_output(data: bytes) -> str:
    """Decode subprocess output as UTF-8.

    Args:
        data: Raw bytes captured from a child process.

    Returns:
        str: Decoded text.

    Raises:
        TextDecodingFailed: If ``data`` is not valid UTF-8.
    """

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise from_decode_error(exc) from exc


@contextmanager
def converting() -> Iterator[None]:
    """Re-raise decode and parse failures from the managed block as diagnostics.

    Raises:
        TextDecodingFailed: When the block raises :class:`UnicodeDecodeError`.
        StructuredDataParseFailed: When the block raises a JSON or validation error.
    """

    try:
        yield
    except UnicodeDecodeError as exc:
        raise from_decode_error(exc) from exc
    except (JSONDecodeError, ValidationError) as exc:
        raise from_parse_error(exc) from exc


__all__ = ["converting", "decode_output", "from_decode_error", "from_parse_error"]
