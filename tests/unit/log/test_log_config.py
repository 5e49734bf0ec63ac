"""Tests for logging configuration and level resolution."""

import logging

import pytest

from sexec.log import InvalidLogLevelError, LogConfig, LogConstants, resolve_level


@pytest.mark.unit
class TestResolveLevel:
    """Test resolve_level()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("critical", logging.CRITICAL),
            ("trace", LogConstants.TRACE),
            ("15", 15),
            (30, 30),
            ("false", False),
            (False, False),
            (True, logging.INFO),
        ],
    )
    def test_levels(self, value, expected):
        assert resolve_level(value) == expected

    def test_invalid(self):
        with pytest.raises(InvalidLogLevelError):
            resolve_level("loud")


@pytest.mark.unit
class TestLogConfig:
    """Test LogConfig construction."""

    def test_defaults(self):
        config = LogConfig()
        assert config.level == logging.INFO
        assert config.location == 0
        assert config.micros is False
        assert config.colors is True

    def test_from_params(self):
        config = LogConfig.from_params("debug", location=True, micros=True, colors=False)
        assert config == LogConfig(
            level=logging.DEBUG, location=1, micros=True, colors=False
        )

    def test_from_config(self, sample_config_dict):
        config = LogConfig.from_config(sample_config_dict)
        assert config.level == logging.DEBUG
        assert config.location == 1
        assert config.colors is False

    def test_from_config_missing_section(self):
        assert LogConfig.from_config({}) == LogConfig.from_params("info")

    def test_from_config_disabled(self):
        assert LogConfig.from_config({"logging": {"level": "false"}}).level is False

    def test_from_config_nested_section(self):
        data = {"app": {"logging": {"level": "warning", "micros": True}}}
        config = LogConfig.from_config(data, "app.logging")
        assert config.level == logging.WARNING
        assert config.micros is True
