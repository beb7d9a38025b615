"""Python-standard logging configuration for lera-bindgen.

Logging is set up through logging.config.dictConfig() from a YAML file. The
packaged configuration lives in src/lera_bindgen/config/ and can be replaced
by pointing LERA_BINDGEN_LOG_CONFIG at another file.
"""

from __future__ import annotations

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Any, cast

import yaml

LOG_CONFIG_ENV_VAR = "LERA_BINDGEN_LOG_CONFIG"

_PACKAGED_CONFIG = Path(__file__).parent / "config" / "logging.yaml"


class LoggingError(Exception):
    """Exception raised for logging configuration errors."""

    pass


def get_config_path() -> Path:
    """Get the path to the logging configuration file.

    Returns:
        Path from LERA_BINDGEN_LOG_CONFIG when set, otherwise the packaged
        configuration

    Raises:
        LoggingError: If the configuration file does not exist

    """
    configured = os.getenv(LOG_CONFIG_ENV_VAR)
    config_path = Path(configured) if configured else _PACKAGED_CONFIG

    if not config_path.is_file():
        raise LoggingError(
            f"No logging configuration found. Expected at: {config_path}"
        )

    return config_path


def load_config(config_path: Path) -> dict[str, Any]:
    """Load logging configuration from YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Logging configuration dictionary

    Raises:
        LoggingError: If configuration cannot be loaded or parsed

    """
    try:
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict):
            raise LoggingError(f"Invalid configuration format in {config_path}")

        return cast(dict[str, Any], config)

    except yaml.YAMLError as e:
        raise LoggingError(f"Failed to parse YAML config {config_path}: {e}") from e
    except OSError as e:
        raise LoggingError(f"Failed to read config file {config_path}: {e}") from e


def apply_level_override(config: dict[str, Any], level: str) -> None:
    """Override the level of every logger in a configuration.

    Handlers are only lowered, never raised, so a handler configured to be
    more verbose keeps its level.

    Raises:
        LoggingError: If the level name is not a standard logging level

    """
    numeric_level = logging.getLevelNamesMapping().get(level.upper())
    if numeric_level is None:
        raise LoggingError(f"Invalid log level: {level}")

    level = level.upper()
    for logger_config in config.get("loggers", {}).values():
        logger_config["level"] = level

    if "root" in config:
        config["root"]["level"] = level

    for handler_config in config.get("handlers", {}).values():
        if isinstance(handler_config, dict) and "level" in handler_config:
            handler_level_str = cast(str, handler_config["level"])
            current_handler_level = logging.getLevelNamesMapping().get(
                handler_level_str.upper(), logging.INFO
            )
            if numeric_level < current_handler_level:
                handler_config["level"] = level


def setup_logging(
    config_path: Path | str | None = None,
    level: str | None = None,
    force_basic: bool = False,
) -> None:
    """Configure logging using Python standard dictConfig.

    Falls back to basic console logging when the configuration cannot be
    applied.

    Args:
        config_path: Path to logging configuration file
        level: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        force_basic: Force basic console logging (fallback mode)

    """
    if force_basic:
        _setup_basic_logging(level or "INFO")
        return

    try:
        if isinstance(config_path, str):
            config_path = Path(config_path)
        elif config_path is None:
            config_path = get_config_path()

        config = load_config(config_path)

        if level:
            apply_level_override(config, level)

        logging.config.dictConfig(config)

        logger = logging.getLogger(__name__)
        logger.debug("Logging configured from: %s", config_path)

    except (LoggingError, ImportError, KeyError, TypeError, ValueError) as e:
        fallback_level = level or "INFO"
        _setup_basic_logging(fallback_level)

        fallback_logger = logging.getLogger(__name__)
        fallback_logger.warning(
            "Failed to configure logging from file (%s), "
            "using basic console logging at %s level",
            e,
            fallback_level,
        )


def _setup_basic_logging(level: str) -> None:
    """Set up basic console logging as fallback.

    Args:
        level: Logging level string

    """
    numeric_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
