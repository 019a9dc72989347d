"""
Tests for settings, exceptions and small utilities
"""

import pytest
from pydantic import ValidationError

from config import Settings, get_settings
from core.exceptions import FetchError, ImageToolError, RemoteServiceError, UnknownOperationError
from core.utils import timer


class TestSettings:
    """Test environment driven settings"""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("IMAGE_TOOL_FETCH__TIMEOUT_SECONDS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.fetch.timeout_seconds == 30.0
        assert settings.output.binary_field == "data"
        assert settings.system.log_level == "INFO"
        assert settings.remote.max_retries == 0

    def test_nested_env_override(self, monkeypatch):
        monkeypatch.setenv("IMAGE_TOOL_FETCH__TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("IMAGE_TOOL_SYSTEM__LOG_LEVEL", "debug")
        settings = Settings(_env_file=None)
        assert settings.fetch.timeout_seconds == 5.0
        assert settings.system.log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("IMAGE_TOOL_SYSTEM__LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

    def test_to_dict(self):
        data = Settings(_env_file=None).to_dict()
        assert set(data) == {"fetch", "remote", "output", "system"}
        assert set(data["system"]) == {"log_level", "log_format"}


class TestExceptions:
    """Test error serialization"""

    def test_all_errors_are_image_tool_errors(self):
        assert issubclass(FetchError, ImageToolError)
        assert issubclass(RemoteServiceError, ImageToolError)

    def test_to_dict(self):
        error = UnknownOperationError("resize", ["b", "a"])
        assert error.to_dict() == {
            "error": "UnknownOperationError",
            "message": "Unknown operation: resize",
            "details": {"operation": "resize", "available": ["a", "b"]},
        }

    def test_remote_error_keeps_cause(self):
        cause = RuntimeError("boom")
        error = RemoteServiceError("svc", "boom", cause=cause)
        assert error.cause is cause
        assert error.details["cause"] == repr(cause)


def test_timer_records_elapsed():
    with timer() as t:
        pass
    assert t["ms"] >= 0
