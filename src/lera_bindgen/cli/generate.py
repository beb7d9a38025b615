"""CLI command implementations for post-processing generated bindings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from lera_bindgen.cli.errors import CLIError, cli_error_handler
from lera_bindgen.cli.formatting import OutputFormatter
from lera_bindgen.logging import setup_logging
from lera_bindgen.post_process import PostProcessor
from lera_bindgen.settings import BindgenSettings
from lera_bindgen.targets.registry import TargetRegistry

logger = logging.getLogger(__name__)


def build_registry() -> TargetRegistry:
    """Build the registry of built-in and installed target plugins."""
    registry = TargetRegistry.with_builtin_targets()
    registry.discover()
    return registry


def _run_post_processing(
    command: str, crate_path: Path, outputs: Mapping[str, Path]
) -> None:
    with cli_error_handler(command, "Post processing failed"):
        if not outputs:
            raise CLIError("No generated files given")

        processor = PostProcessor(BindgenSettings.from_env(), build_registry())
        written = processor.process(crate_path, outputs)
        OutputFormatter().format_written_files(written)
        logger.info("Post processed %d file(s)", len(written))


def post_process_target_command(
    target_name: str,
    generated_path: Path,
    crate_path: Path,
    log_level: str = "INFO",
) -> None:
    """CLI command implementation for post-processing one generated file.

    Args:
        target_name: Registered target name (e.g., "swift", "kotlin")
        generated_path: File written by UniFFI
        crate_path: Root directory of the Rust crate
        log_level: Logging level

    """
    setup_logging(level=log_level)
    _run_post_processing(target_name, crate_path, {target_name: generated_path})


def generate_command(
    crate_path: Path,
    outputs: Mapping[str, Path | None],
    log_level: str = "INFO",
) -> None:
    """CLI command implementation for post-processing several targets at once.

    Nothing is written unless every target succeeds.

    Args:
        crate_path: Root directory of the Rust crate
        outputs: Generated file per target name, None when not requested
        log_level: Logging level

    """
    setup_logging(level=log_level)
    requested = {name: path for name, path in outputs.items() if path is not None}
    _run_post_processing("generate", crate_path, requested)
