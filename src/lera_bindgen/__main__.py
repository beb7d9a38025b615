"""Main entry point for lera-bindgen.

This module provides the command-line interface, including commands for:
- Appending view models to UniFFI generated Swift and Kotlin files
- Inspecting the models declared by a Rust crate
- Listing available target languages
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import find_dotenv, load_dotenv

from lera_bindgen.cli import (
    generate_command,
    inspect_crate_command,
    list_targets_command,
    post_process_target_command,
)

# LERA_BINDGEN_* settings may come from a .env file next to the build
load_dotenv(find_dotenv(usecwd=True))

app = typer.Typer(name="lera-bindgen", no_args_is_help=True)

CratePath = Annotated[
    Path,
    typer.Option(
        "--crate",
        "-c",
        help="Root directory of the Rust crate declaring the models",
        file_okay=False,
        dir_okay=True,
    ),
]

LogLevel = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        case_sensitive=False,
    ),
]


@app.command()
def swift(
    generated: Annotated[
        Path,
        typer.Argument(help="Swift file generated by UniFFI", dir_okay=False),
    ],
    crate: CratePath = Path("."),
    log_level: LogLevel = "INFO",
) -> None:
    """Append Swift view models to a UniFFI generated file.

    Example:
        lera-bindgen swift out/MyLib.swift --crate ./my-lib

    """
    post_process_target_command("swift", generated, crate, log_level)


@app.command()
def kotlin(
    generated: Annotated[
        Path,
        typer.Argument(help="Kotlin file generated by UniFFI", dir_okay=False),
    ],
    crate: CratePath = Path("."),
    log_level: LogLevel = "INFO",
) -> None:
    """Append Kotlin view models to a UniFFI generated file.

    Example:
        lera-bindgen kotlin out/my_lib.kt --crate ./my-lib

    """
    post_process_target_command("kotlin", generated, crate, log_level)


@app.command()
def generate(
    crate: CratePath = Path("."),
    swift_file: Annotated[
        Path | None,
        typer.Option("--swift", help="Swift file generated by UniFFI", dir_okay=False),
    ] = None,
    kotlin_file: Annotated[
        Path | None,
        typer.Option(
            "--kotlin", help="Kotlin file generated by UniFFI", dir_okay=False
        ),
    ] = None,
    log_level: LogLevel = "INFO",
) -> None:
    """Post-process several targets at once, writing nothing if any fails.

    Example:
        lera-bindgen generate -c ./my-lib --swift out/MyLib.swift --kotlin out/lib.kt

    """
    generate_command(crate, {"swift": swift_file, "kotlin": kotlin_file}, log_level)


@app.command()
def inspect(
    crate: CratePath = Path("."),
    log_level: LogLevel = "INFO",
) -> None:
    """Show the models, states and methods declared by a crate."""
    inspect_crate_command(crate, log_level)


@app.command(name="ls-targets")
def list_available_targets(log_level: LogLevel = "INFO") -> None:
    """List available (built-in & installed) target languages."""
    list_targets_command(log_level)


if __name__ == "__main__":
    app()
