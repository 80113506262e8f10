"""
Unit tests for waypoint/config.py - TOML defaults and logging setup
"""
import logging
import warnings
from pathlib import Path

import pytest

from waypoint.config import (
    DEFAULT_CONFIG,
    configure_logging,
    load_toml_config,
    load_validator_config,
)
from waypoint.errors import ConfigError
from waypoint.schemas import ValidatorConfig, create_graph


@pytest.fixture
def write_config(tmp_path):
    def _write(text):
        path = tmp_path / "waypoint.toml"
        path.write_text(text, encoding="utf-8")
        return path
    return _write


def test_bundled_config_is_strictest():
    assert DEFAULT_CONFIG.is_file()
    assert load_validator_config() == ValidatorConfig()


def test_bundled_config_ships_inside_package():
    import waypoint

    assert DEFAULT_CONFIG.name == "waypoint.toml"
    assert Path(str(DEFAULT_CONFIG)).resolve().parent == Path(waypoint.__file__).resolve().parent


def test_bundled_config_loads_without_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        config = load_toml_config()

    assert config["logging"]["level"] == "WARNING"


def test_load_validator_config_partial(write_config):
    path = write_config("[validators]\nallow_cycles = true\n")

    config = load_validator_config(path)

    assert config.allow_cycles is True
    assert config.allow_conditional_ends is False
    assert create_graph({}, validators=config).validators.allow_cycles is True


def test_missing_section_yields_defaults(write_config):
    path = write_config("[logging]\nlevel = \"INFO\"\n")

    assert load_validator_config(path) == ValidatorConfig()


def test_unknown_toggle_rejected(write_config):
    path = write_config("[validators]\nallow_anything = true\n")

    with pytest.raises(ConfigError):
        load_validator_config(path)


def test_non_bool_toggle_rejected(write_config):
    path = write_config("[validators]\nallow_cycles = \"yes\"\n")

    with pytest.raises(ConfigError):
        load_validator_config(path)


def test_missing_file_warns(tmp_path):
    with pytest.warns(UserWarning, match="Failed to load config"):
        assert load_toml_config(tmp_path / "absent.toml") == {}


def test_malformed_file_warns(write_config):
    path = write_config("[validators\n")

    with pytest.warns(UserWarning):
        assert load_toml_config(path) == {}


# =============================================================================
# LOGGING
# =============================================================================

class TestConfigureLogging:
    """Level precedence: argument, environment, file, default."""

    def test_explicit_level(self, monkeypatch):
        monkeypatch.delenv("WAYPOINT_LOG_LEVEL", raising=False)
        assert configure_logging("debug") == logging.DEBUG
        assert logging.getLogger("waypoint").level == logging.DEBUG

    def test_environment_level(self, monkeypatch):
        monkeypatch.setenv("WAYPOINT_LOG_LEVEL", "ERROR")
        assert configure_logging() == logging.ERROR

    def test_file_level(self, monkeypatch, write_config):
        monkeypatch.delenv("WAYPOINT_LOG_LEVEL", raising=False)
        path = write_config("[logging]\nlevel = \"INFO\"\n")
        assert configure_logging(path=path) == logging.INFO

    def test_default_level(self, monkeypatch):
        monkeypatch.delenv("WAYPOINT_LOG_LEVEL", raising=False)
        assert configure_logging() == logging.WARNING

    def test_unknown_level_rejected(self):
        with pytest.raises(ConfigError):
            configure_logging("LOUD")
