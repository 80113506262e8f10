"""
WAYPOINT CONFIG - Validator Defaults and Logging Setup

Defaults are read from waypoint.toml, shipped inside the waypoint package
and located with importlib.resources:

    [validators]
    allow_cycles = false
    allow_conditional_ends = false
    allow_unknown_destinations = false

    [logging]
    level = "WARNING"
    format = "%(asctime)s %(levelname)s %(name)s: %(message)s"

The [validators] section supplies project-wide defaults for graphs built
with create_graph(nodes, validators=load_validator_config()). Graph
definitions themselves are Python code, never read from this file.

Usage:
    from waypoint.config import configure_logging, load_validator_config

    configure_logging()
    graph = create_graph(nodes, validators=load_validator_config())
"""
import logging
import os
import warnings
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, Optional, Union

from waypoint.errors import ConfigError
from waypoint.schemas import ValidatorConfig, coerce_validator_config

DEFAULT_CONFIG = files("waypoint").joinpath("waypoint.toml")
LOG_LEVEL_ENV = "WAYPOINT_LOG_LEVEL"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_toml_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from waypoint.toml.

    With no `path`, the copy bundled in the waypoint package is read.
    A missing or unreadable file is not fatal: a warning is issued and an
    empty dict is returned so every setting falls back to its default.
    """
    import tomllib

    config_file = Path(path) if path is not None else DEFAULT_CONFIG
    try:
        with config_file.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        warnings.warn(f"Failed to load config from TOML: {e}")
        return {}


def load_validator_config(path: Optional[Union[str, Path]] = None) -> ValidatorConfig:
    """
    Build a ValidatorConfig from the [validators] section.

    Raises:
        ConfigError: If the section holds unknown toggles or non-bool values
    """
    section = load_toml_config(path).get("validators", {})
    if not isinstance(section, dict):
        raise ConfigError("[validators] must be a table", key="validators")
    return coerce_validator_config(section)


def configure_logging(
    level: Optional[str] = None,
    path: Optional[Union[str, Path]] = None,
) -> int:
    """
    Configure stdlib logging for the waypoint loggers.

    Precedence: explicit `level`, then $WAYPOINT_LOG_LEVEL, then the
    [logging] section, then WARNING.

    Returns:
        The numeric level applied

    Raises:
        ConfigError: If the level name is not a logging level
    """
    section = load_toml_config(path).get("logging", {})
    name = level or os.environ.get(LOG_LEVEL_ENV) or section.get("level", "WARNING")

    numeric = logging.getLevelName(str(name).upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level: {name}", key="logging.level")

    logging.basicConfig(format=section.get("format", DEFAULT_LOG_FORMAT))
    logging.getLogger("waypoint").setLevel(numeric)
    return numeric
