"""Typer CLI for the countertop configurator."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from countertops.application import ConfigurationEditor
from countertops.application.config import (
    ConfigError,
    ShopSettings,
    design_to_configuration,
    load_design,
    load_settings,
    settings_to_cut_sheet_settings,
    settings_to_placement_rules,
    settings_to_rates,
)
from countertops.cli.commands import display_load_error, validate_command
from countertops.domain import Configuration, PricingEngine, SinkPlacementEngine
from countertops.infrastructure import (
    ConfigCodec,
    DesignSummaryFormatter,
    DxfExporter,
    QuoteFormatter,
)
from countertops.infrastructure.exporters import ExporterRegistry, ExportManager


app = typer.Typer(
    name="countertops",
    help="Design stone countertops, price them and produce DXF cut sheets.",
)

# Register validate command
app.command(name="validate")(validate_command)


SettingsOption = Annotated[
    Path | None,
    typer.Option("--settings", "-s", help="Path to a shop settings file"),
]


@dataclass
class _Session:
    """Services configured from the shop settings."""

    settings: ShopSettings | None
    placement_engine: SinkPlacementEngine
    pricing_engine: PricingEngine

    @property
    def editor(self) -> ConfigurationEditor:
        return ConfigurationEditor(self.placement_engine)


def _open_session(settings_file: Path | None) -> _Session:
    try:
        settings = load_settings(settings_file) if settings_file else None
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)
    return _Session(
        settings=settings,
        placement_engine=SinkPlacementEngine(settings_to_placement_rules(settings)),
        pricing_engine=PricingEngine(settings_to_rates(settings)),
    )


def _load_configuration(design_file: Path, session: _Session) -> Configuration:
    """Load a design file, reporting skipped steps as warnings on stderr."""
    try:
        design = load_design(design_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    configuration, messages = design_to_configuration(design, session.editor)
    for message in messages:
        typer.echo(f"Warning: {message}", err=True)
    return configuration


@app.command()
def quote(
    design_file: Annotated[Path, typer.Argument(help="Path to a JSON design file")],
    settings_file: SettingsOption = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the cent-rounded summary as JSON")
    ] = False,
) -> None:
    """Print the price breakdown for a design."""
    session = _open_session(settings_file)
    configuration = _load_configuration(design_file, session)
    pricing = session.pricing_engine.price(configuration)

    if as_json:
        payload = {**pricing.summary(), "total_cents": pricing.total_cents}
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(DesignSummaryFormatter().format(configuration))
    typer.echo()
    typer.echo(QuoteFormatter().format(pricing))


@app.command()
def cutsheet(
    design_file: Annotated[Path, typer.Argument(help="Path to a JSON design file")],
    output_file: Annotated[
        Path, typer.Option("--output", "-o", help="Where to write the DXF file")
    ],
    settings_file: SettingsOption = None,
) -> None:
    """Write the DXF cut sheet for a design."""
    session = _open_session(settings_file)
    configuration = _load_configuration(design_file, session)

    exporter = DxfExporter(settings_to_cut_sheet_settings(session.settings))
    try:
        exporter.export(configuration, output_file)
    except OSError as e:
        typer.echo(f"Export error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Cut sheet written to {output_file}")


@app.command()
def encode(
    design_file: Annotated[Path, typer.Argument(help="Path to a JSON design file")],
) -> None:
    """Print the checkout metadata fields for a design as JSON."""
    session = _open_session(None)
    configuration = _load_configuration(design_file, session)
    typer.echo(json.dumps(ConfigCodec().to_fields(configuration), indent=2))


@app.command()
def decode(
    fields_file: Annotated[
        Path, typer.Argument(help="JSON file holding checkout metadata fields")
    ],
    settings_file: SettingsOption = None,
) -> None:
    """Decode checkout metadata and print the design and its quote."""
    session = _open_session(settings_file)
    try:
        fields = json.loads(fields_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Error: cannot read metadata from {fields_file}: {e}", err=True)
        raise typer.Exit(code=1)
    if not isinstance(fields, dict):
        typer.echo("Error: metadata must be a JSON object", err=True)
        raise typer.Exit(code=1)

    configuration = ConfigCodec().from_fields(fields)
    if configuration is None:
        typer.echo("Error: metadata does not hold a valid configuration", err=True)
        raise typer.Exit(code=1)

    typer.echo(DesignSummaryFormatter().format(configuration))
    typer.echo()
    typer.echo(QuoteFormatter().format(session.pricing_engine.price(configuration)))

    errors = session.placement_engine.validate(configuration)
    if errors:
        typer.echo("Placement errors:", err=True)
        for error in errors:
            typer.echo(f"  {error}", err=True)
        raise typer.Exit(code=1)


@app.command()
def export(
    design_file: Annotated[Path, typer.Argument(help="Path to a JSON design file")],
    output_formats: Annotated[
        str,
        typer.Option(
            "--formats",
            "-f",
            help="Comma-separated export formats: dxf,json (or 'all')",
        ),
    ] = "all",
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-d", help="Output directory for exported files"),
    ] = Path("."),
    project_name: Annotated[
        str,
        typer.Option("--project-name", help="Base name for exported files"),
    ] = "countertop",
    settings_file: SettingsOption = None,
) -> None:
    """Export a design to one or more registered formats."""
    if output_formats.lower() == "all":
        formats = ExporterRegistry.available_formats()
    else:
        formats = [f.strip().lower() for f in output_formats.split(",") if f.strip()]

    available = ExporterRegistry.available_formats()
    invalid = [f for f in formats if f not in available]
    if invalid:
        typer.echo(f"Unknown formats: {', '.join(invalid)}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)
    if not formats:
        typer.echo("No valid formats to export.", err=True)
        raise typer.Exit(code=1)

    session = _open_session(settings_file)
    configuration = _load_configuration(design_file, session)

    manager = ExportManager(
        output_dir,
        exporter_options={
            "dxf": {"settings": settings_to_cut_sheet_settings(session.settings)},
            "json": {
                "pricing_engine": session.pricing_engine,
                "placement_engine": session.placement_engine,
            },
        },
    )
    try:
        files = manager.export_all(formats, configuration, project_name)
    except OSError as e:
        typer.echo(f"Export error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo("Exported files:")
    for fmt, path in files.items():
        typer.echo(f"  {fmt.upper()}: {path}")


if __name__ == "__main__":
    app()
