"""Tests for shared LoggingConfig."""

import pytest
from pydantic import ValidationError
from artifact_unpack.common import LoggingConfig


class TestLoggingConfig:
    """Test shared LoggingConfig validation."""

    def test_default_values(self):
        """Test default values."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.format == "json"
        assert config.file is None

    def test_all_valid_log_levels(self):
        """Test that all valid log levels are accepted."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR"]:
            config = LoggingConfig(level=level)
            assert config.level == level

    def test_all_valid_formats(self):
        """Test that all valid formats are accepted."""
        for fmt in ["simple", "detailed", "json"]:
            config = LoggingConfig(format=fmt)
            assert config.format == fmt

    def test_case_insensitive_input(self):
        """Test that level and format are normalized."""
        config = LoggingConfig(level="warning", format="JSON")
        assert config.level == "WARNING"
        assert config.format == "json"

    def test_rejects_invalid_log_level(self):
        """Test that invalid log levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="TRACE")

        with pytest.raises(ValidationError):
            LoggingConfig(level="CRITICAL")

    def test_rejects_invalid_format(self):
        """Test that invalid formats are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")

    def test_rejects_unknown_fields(self):
        """Test that typos in field names are caught."""
        with pytest.raises(ValidationError) as exc_info:
            LoggingConfig(levl="INFO")

        assert "extra_forbidden" in str(exc_info.value).lower()

    def test_serialization(self):
        """Test that config can be serialized."""
        config = LoggingConfig(level="DEBUG", format="detailed", file="/tmp/log.txt")

        assert config.model_dump() == {
            "level": "DEBUG",
            "format": "detailed",
            "file": "/tmp/log.txt"
        }
