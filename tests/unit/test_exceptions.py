"""Tests for the coded exception type and its helpers."""

import logging

from kvsource.common.exceptions import (
    ErrorCode,
    KVSourceError,
    configuration_error,
    refresh_error,
    validation_error,
)


def test_str_includes_code_and_cause():
    cause = RuntimeError("socket closed")
    error = KVSourceError("refresh failed", ErrorCode.REFRESH_ERROR, cause=cause)

    assert str(error) == "[REFRESH_001] refresh failed (caused by: RuntimeError: socket closed)"


def test_error_logs_itself(caplog):
    with caplog.at_level(logging.ERROR, logger="kvsource.common.exceptions"):
        KVSourceError("boom", ErrorCode.CONFIG_ERROR, details={"key": "value"})

    (record,) = caplog.records
    assert record.getMessage() == "boom"
    assert record.error_code == "CONFIG_001"
    assert record.details == {"key": "value"}


def test_to_dict():
    error = configuration_error("missing url", config_key="KEYVAULT_URL")

    assert error.to_dict() == {
        "type": "KVSourceError",
        "message": "missing url",
        "error_code": "CONFIG_001",
        "error_name": "CONFIG_ERROR",
        "details": {"config_key": "KEYVAULT_URL"},
    }


def test_configuration_error_accepts_specific_code():
    error = configuration_error("missing", error_code=ErrorCode.CONFIG_MISSING)
    assert error.error_code is ErrorCode.CONFIG_MISSING


def test_validation_error_is_value_error():
    error = validation_error("bad key", field="secret_keys[0]", value="")

    assert isinstance(error, ValueError)
    assert error.details == {"field": "secret_keys[0]", "value": "''"}


def test_refresh_error_wraps_cause():
    cause = TimeoutError("slow vault")
    error = refresh_error(cause, mode="targeted", secret_name="db-password")

    assert error.cause is cause
    assert error.error_code is ErrorCode.REFRESH_ERROR
    assert error.details == {"mode": "targeted", "secret_name": "db-password"}
    assert "slow vault" in error.message
