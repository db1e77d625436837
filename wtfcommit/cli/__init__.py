"""CLI entry point for wtfcommit.

This module provides the main CLI application that combines the default
command and the config subcommands into a single interface.
"""

import typer

from wtfcommit.cli.config import config_app
from wtfcommit.cli.main import main_command

# Main application
app = typer.Typer(
    name="wtfcommit",
    help="wtfcommit: AI-generated commit messages for your pending changes",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Set the main callback for default behavior
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "main_command",
]
