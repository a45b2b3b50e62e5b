from __future__ import annotations

import pytest

from shared.result import Result


def test_ok_result_unwraps_value() -> None:
    result: Result[int, str] = Result.ok(3)
    assert result.is_ok() and not result.is_err()
    assert result.unwrap() == 3
    with pytest.raises(RuntimeError):
        result.unwrap_err()


def test_error_result_reraises_stored_exception() -> None:
    error = ValueError("boom")
    result: Result[int, ValueError] = Result.err(error)
    assert result.is_err()
    assert result.unwrap_err() is error
    with pytest.raises(ValueError, match="boom"):
        result.unwrap()


def test_plain_error_value_raises_runtime_error() -> None:
    with pytest.raises(RuntimeError, match="nope"):
        Result.err("nope").unwrap()
