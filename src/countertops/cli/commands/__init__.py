"""CLI command implementations for the countertops application.

This package contains subcommands for the countertops CLI, including:
- validate: Validate a design file
"""

from countertops.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "validate_command"]
