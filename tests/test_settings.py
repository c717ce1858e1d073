"""Tests for ValidationSettings."""

import logging
from decimal import Decimal

import pytest

from graphguard import ConfigurationError, ValidationSettings
from graphguard.settings import load_type


class TestValidationSettings:
    """Test settings construction and overrides."""

    def test_defaults(self):
        """Test default values."""
        settings = ValidationSettings()
        assert settings.max_depth == 100
        assert settings.leaf_types == ()

    def test_invalid_max_depth(self):
        """Test that non-positive depths are rejected."""
        with pytest.raises(ConfigurationError):
            ValidationSettings(max_depth=0)
        with pytest.raises(ConfigurationError):
            ValidationSettings(max_depth="deep")

    def test_from_dict(self):
        """Test loading from a dictionary with dotted type paths."""
        settings = ValidationSettings.from_dict({
            "max_depth": "25",
            "leaf_types": ["decimal.Decimal", dict],
        })
        assert settings.max_depth == 25
        assert settings.leaf_types == (Decimal, dict)

    def test_from_dict_unknown_keys_warn(self, caplog):
        """Test that unknown keys are logged and ignored."""
        with caplog.at_level(logging.WARNING, logger="graphguard.settings"):
            settings = ValidationSettings.from_dict({"max_depht": 5})
        assert settings.max_depth == 100
        assert "max_depht" in caplog.text

    def test_from_env(self, monkeypatch):
        """Test environment overrides."""
        monkeypatch.setenv("GRAPHGUARD_MAX_DEPTH", "7")
        assert ValidationSettings.from_env().max_depth == 7

        base = ValidationSettings(max_depth=3, leaf_types=(Decimal,))
        settings = ValidationSettings.from_env(base=base)
        assert settings.max_depth == 7
        assert settings.leaf_types == (Decimal,)

    def test_from_env_custom_prefix(self, monkeypatch):
        """Test a custom environment prefix."""
        monkeypatch.delenv("GRAPHGUARD_MAX_DEPTH", raising=False)
        monkeypatch.setenv("MYAPP_MAX_DEPTH", "12")
        assert ValidationSettings.from_env(prefix="MYAPP_").max_depth == 12
        assert ValidationSettings.from_env().max_depth == 100

    def test_invalid_env_value(self, monkeypatch):
        """Test that a malformed environment value is rejected."""
        monkeypatch.setenv("GRAPHGUARD_MAX_DEPTH", "lots")
        with pytest.raises(ConfigurationError):
            ValidationSettings.from_env()

    def test_merged_with_and_to_dict(self):
        """Test copying with overrides and serialising."""
        settings = ValidationSettings().merged_with(max_depth=10, leaf_types=(Decimal,))
        assert settings.to_dict() == {"max_depth": 10, "leaf_types": ["decimal.Decimal"]}


class TestLoadType:
    """Test dotted path loading."""

    def test_load(self):
        """Test loading a class."""
        assert load_type("decimal.Decimal") is Decimal

    @pytest.mark.parametrize("path", ["Decimal", "no_such_module.Thing", "decimal.Missing", "os.path.join"])
    def test_invalid_paths(self, path):
        """Test malformed, missing and non-class paths."""
        with pytest.raises(ConfigurationError):
            load_type(path)
