"""CLI command implementations for inspecting crates and listing targets."""

from __future__ import annotations

import logging
from pathlib import Path

from lera_bindgen.cli.errors import cli_error_handler
from lera_bindgen.cli.formatting import OutputFormatter
from lera_bindgen.cli.generate import build_registry
from lera_bindgen.extractor import ModelExtractor
from lera_bindgen.logging import setup_logging
from lera_bindgen.settings import BindgenSettings

logger = logging.getLogger(__name__)


def inspect_crate_command(crate_path: Path, log_level: str = "INFO") -> None:
    """CLI command implementation for showing the models of a crate.

    Args:
        crate_path: Root directory of the Rust crate
        log_level: Logging level

    """
    setup_logging(level=log_level)
    with cli_error_handler("inspect", "Failed to inspect crate"):
        models = ModelExtractor(BindgenSettings.from_env()).extract(crate_path)
        logger.info("Found %d model(s) in %s", len(models), crate_path)
        OutputFormatter().format_models(models, crate_path)


def list_targets_command(log_level: str = "INFO") -> None:
    """CLI command implementation for listing target languages.

    Args:
        log_level: Logging level

    """
    setup_logging(level=log_level)
    with cli_error_handler("ls-targets", "Failed to list targets"):
        registry = build_registry()
        targets = [registry.get(name) for name in registry.list_targets()]
        logger.info("Found %d available targets", len(targets))
        OutputFormatter().format_target_list(targets)
