"""CLI error reporting for lera-bindgen.

Generator errors are shown as a Rich panel on stderr. Structural errors also
list the declaration and file to fix, and a missing-models error lists every
directory that was searched.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from lera_bindgen.errors import BindgenError, ModelsNotFoundError, StructuralError

logger = logging.getLogger(__name__)
console = Console(stderr=True)


class CLIError(BindgenError):
    """Raised when a command is invoked with unusable arguments."""

    pass


def describe_error(error: Exception) -> str:
    """Build the Rich markup shown in the error panel for an exception.

    Args:
        error: The exception raised by a command

    Returns:
        Markup with the message and, where known, where to look

    """
    lines = [f"[red]{escape(str(error))}[/red]"]
    match error:
        case StructuralError(declaration=declaration, source_path=source_path):
            lines.append("")
            lines.append(f"[bold]Declaration:[/bold] {escape(declaration)}")
            lines.append(f"[bold]File:[/bold] {escape(str(source_path))}")
        case ModelsNotFoundError(inspected_dirs=inspected_dirs):
            lines.append("")
            lines.append("[bold]Searched:[/bold]")
            lines.extend(f"  • {escape(str(path))}" for path in inspected_dirs)
        case BindgenError():
            pass
        case _:
            lines.append(f"[dim]({type(error).__name__})[/dim]")
    return "\n".join(lines)


@contextmanager
def cli_error_handler(command: str, title: str) -> Generator[None]:
    """Report any failure of a command as an error panel and exit with 1.

    Generator errors are expected and logged as errors. Anything else is
    logged with its traceback.

    Args:
        command: CLI command name, used in the log record
        title: Panel title for the error display

    """
    try:
        yield
    except BindgenError as e:
        logger.error("%s (%s): %s", title, command, e)
        console.print(Panel(describe_error(e), title=f"❌ {title}", border_style="red"))
        raise typer.Exit(1) from e
    except Exception as e:
        logger.exception("Unexpected failure in '%s'", command)
        console.print(Panel(describe_error(e), title=f"❌ {title}", border_style="red"))
        raise typer.Exit(1) from e
