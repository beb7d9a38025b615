"""Output formatting for lera-bindgen CLI commands."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lera_bindgen.ir import ParsedMethod, ParsedModel
from lera_bindgen.targets.protocols import TargetLanguage

logger = logging.getLogger(__name__)
console = Console()


class OutputFormatter:
    """Handles formatting CLI output for different commands."""

    def format_models(self, models: Sequence[ParsedModel], crate_path: Path) -> None:
        """Format and print the models discovered in a crate.

        Args:
            models: Models in discovery order
            crate_path: Crate the models were read from

        """
        table = Table(
            title=f"🦀 Models in {crate_path}",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Model", style="cyan", no_wrap=True)
        table.add_column("State", style="green")
        table.add_column("Methods", style="white")
        table.add_column("Options", style="yellow")
        table.add_column("Source", style="dim")

        for model in models:
            table.add_row(
                model.model_name,
                model.state_name,
                "\n".join(_describe_method(method) for method in model.methods)
                or "-",
                _describe_options(model),
                str(model.source_path),
            )
            logger.debug(
                "Model %s: %d methods", model.model_name, len(model.methods)
            )

        console.print(table)

    def format_target_list(self, targets: Sequence[TargetLanguage]) -> None:
        """Format and print the registered target languages.

        Args:
            targets: Registered targets

        """
        if not targets:
            console.print(
                Panel(
                    "[yellow]No targets available. "
                    "Install a target plugin to see it here.[/yellow]",
                    title="⚠️  Warning",
                    border_style="yellow",
                )
            )
            logger.warning("No targets registered in registry")
            return

        table = Table(
            title="🔧 Available Targets",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Extension", style="white")
        table.add_column("Template", style="white")
        table.add_column("Class", style="dim")

        for target in targets:
            target_class = type(target)
            table.add_row(
                target.name,
                target.file_extension,
                target.template_name,
                f"{target_class.__module__}.{target_class.__name__}",
            )

        console.print(table)

    def format_written_files(self, paths: Sequence[Path]) -> None:
        """Print the files rewritten by a post-processing run."""
        for path in paths:
            console.print(f"[green]✅ View models written to {path}[/green]")


def _describe_method(method: ParsedMethod) -> str:
    params = ", ".join(param.name for param in method.params)
    prefix = "async " if method.is_async else ""
    suffix = " throws" if method.return_type.uses_result else ""
    return f"{prefix}{method.camel_name}({params}){suffix}"


def _describe_options(model: ParsedModel) -> str:
    options = []
    if model.enable_samples:
        options.append("samples")
    if model.has_navigator:
        options.append("navigating")
    return ", ".join(options) or "-"
