"""CLI command implementations for lera-bindgen."""

from lera_bindgen.cli.errors import CLIError
from lera_bindgen.cli.generate import generate_command, post_process_target_command
from lera_bindgen.cli.list import inspect_crate_command, list_targets_command

__all__ = [
    "CLIError",
    "generate_command",
    "inspect_crate_command",
    "list_targets_command",
    "post_process_target_command",
]
