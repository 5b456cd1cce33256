# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for decode and parse failure conversions."""

from __future__ import annotations

import json

import pytest
from pydantic import BaseModel, ValidationError

from pykcov.diagnostics import (
    StructuredDataParseFailed,
    TextDecodingFailed,
    converting,
    decode_output,
    from_decode_error,
    from_parse_error,
)


class _Message(BaseModel):
    reason: str


def _decode_error() -> UnicodeDecodeError:
    with pytest.raises(UnicodeDecodeError) as excinfo:
        b"valid prefix \xc3\x28".decode("utf-8")
    return excinfo.value


def test_from_decode_error_keeps_position_detail() -> None:
    error = _decode_error()

    diagnostic = from_decode_error(error)

    assert isinstance(diagnostic, TextDecodingFailed)
    assert str(diagnostic.cause) == str(error)
    assert diagnostic.error.start == error.start


def test_from_parse_error_wraps_json_error() -> None:
    with pytest.raises(json.JSONDecodeError) as excinfo:
        json.loads("{not json")

    diagnostic = from_parse_error(excinfo.value)

    assert isinstance(diagnostic, StructuredDataParseFailed)
    assert diagnostic.cause is excinfo.value
    assert str(diagnostic.cause) == str(excinfo.value)


def test_from_parse_error_wraps_validation_error() -> None:
    with pytest.raises(ValidationError) as excinfo:
        _Message.model_validate_json('{"reason": 3}')

    diagnostic = from_parse_error(excinfo.value)

    assert diagnostic.cause is excinfo.value


def test_decode_output_returns_text() -> None:
    assert decode_output("héllo".encode()) == "héllo"


def test_decode_output_raises_diagnostic_chained_to_original() -> None:
    with pytest.raises(TextDecodingFailed) as excinfo:
        decode_output(b"\xff")

    original = excinfo.value.__cause__
    assert isinstance(original, UnicodeDecodeError)
    assert str(excinfo.value.cause) == str(original)


def test_converting_maps_decode_errors() -> None:
    with pytest.raises(TextDecodingFailed):
        with converting():
            b"\xff".decode("utf-8")


def test_converting_maps_json_errors() -> None:
    with pytest.raises(StructuredDataParseFailed) as excinfo:
        with converting():
            json.loads("[")

    assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)
    assert excinfo.value.cause is excinfo.value.__cause__


def test_converting_maps_validation_errors() -> None:
    with pytest.raises(StructuredDataParseFailed) as excinfo:
        with converting():
            _Message.model_validate_json("not json at all")

    assert isinstance(excinfo.value.cause, ValidationError)


def test_converting_leaves_other_errors_alone() -> None:
    with pytest.raises(KeyError):
        with converting():
            raise KeyError("reason")
