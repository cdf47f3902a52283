"""Validate command for checking design files.

This module provides the `validate` command that checks a JSON design file
for schema errors and for sink placement problems.
"""

from pathlib import Path
from typing import Annotated

import typer

from countertops.application import ConfigurationEditor
from countertops.application.config import (
    ConfigError,
    design_to_configuration,
    load_design,
    load_settings,
    settings_to_placement_rules,
)
from countertops.domain import SinkPlacementEngine


def validate_command(
    design_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON design file to validate"),
    ],
    settings_file: Annotated[
        Path | None,
        typer.Option("--settings", "-s", help="Path to a shop settings file"),
    ] = None,
) -> None:
    """Validate a countertop design file.

    Checks the design file for:
    - JSON syntax errors
    - Schema validation errors (unknown fields, invalid types, etc.)
    - Sink placement problems (does not fit, no room, crowding)

    Exit codes:
        0 - Design is valid
        1 - Design has errors

    Example:
        countertops validate vanity.json
    """
    typer.echo(f"Validating {design_file}...")
    typer.echo()

    try:
        design = load_design(design_file)
        settings = load_settings(settings_file) if settings_file else None
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    engine = SinkPlacementEngine(settings_to_placement_rules(settings))
    configuration, messages = design_to_configuration(
        design, ConfigurationEditor(engine)
    )
    messages.extend(engine.validate(configuration))

    if messages:
        typer.echo("Errors:", err=True)
        for message in messages:
            typer.echo(f"  {message}", err=True)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    typer.echo("Design is valid.")


def display_load_error(error: ConfigError) -> None:
    """Display a settings or design file loading error on stderr."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path", "unknown")
            message = detail.get("message", "Unknown error")
            value = detail.get("value")
            typer.echo(f"  {path}: {message}", err=True)
            if value is not None:
                typer.echo(f"    Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)
