"""Integration tests for the countertops CLI.

These tests run the Typer app end-to-end on design files written to a
temporary directory, covering quotes, cut sheets, transport fields,
validation and multi-format export.
"""

from __future__ import annotations

import json
from pathlib import Path

import ezdxf
import pytest
from typer.testing import CliRunner

from countertops.cli.main import app
from countertops.domain import Configuration, RectangleDimensions
from countertops.infrastructure import ConfigCodec

pytestmark = pytest.mark.integration

VANITY = {
    "schema_version": "1.0",
    "shape": "rectangle",
    "dimensions": {"length": 36, "width": 25.5},
    "polished_edges": ["top", "right", "bottom", "left"],
    "zip": "63052",
}

DOUBLE_VANITY = {
    "dimensions": {"length": 72, "width": 22},
    "polished_edges": ["bottom"],
    "backsplash": True,
    "sinks": [
        {"template": "bath-oval", "faucet_holes": 3, "faucet_spread": 8},
        {"template": "bath-rect"},
    ],
    "zip": "62704",
}

CROWDED = {
    "dimensions": {"length": 48, "width": 24},
    "sinks": [{"template": "bath-oval"}, {"template": "kitchen-rect"}],
    "zip": "63052",
}


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestQuoteCommand:
    """Tests for the quote command."""

    def test_quote_table(self, runner: CliRunner, write_json) -> None:
        result = runner.invoke(app, ["quote", str(write_json("vanity.json", VANITY))])

        assert result.exit_code == 0
        assert "DESIGN" in result.output
        assert "TOTAL" in result.output
        assert "426.19" in result.output

    def test_quote_json(self, runner: CliRunner, write_json) -> None:
        result = runner.invoke(
            app, ["quote", str(write_json("vanity.json", VANITY)), "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total"] == 426.19
        assert data["total_cents"] == 42619
        assert data["cwt"] == 1

    def test_settings_change_the_price(self, runner: CliRunner, write_json) -> None:
        design = write_json("vanity.json", VANITY)
        settings = write_json("settings.json", {"pricing": {"material_per_sqft": 60}})

        result = runner.invoke(
            app, ["quote", str(design), "--json", "--settings", str(settings)]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["product"] == 382.5

    def test_skipped_sink_is_warned(self, runner: CliRunner, write_json) -> None:
        result = runner.invoke(app, ["quote", str(write_json("crowded.json", CROWDED))])

        assert result.exit_code == 0
        assert "Warning: sinks[1]: There is not enough room" in result.output

    def test_missing_design_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["quote", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_settings_file(self, runner: CliRunner, write_json) -> None:
        design = write_json("vanity.json", VANITY)
        settings = write_json("settings.json", {"placement": {"max_sinks": 5}})

        result = runner.invoke(app, ["quote", str(design), "-s", str(settings)])

        assert result.exit_code == 1
        assert "placement.max_sinks" in result.output


class TestCutsheetCommand:
    """Tests for writing DXF cut sheets."""

    def test_writes_readable_dxf(
        self, runner: CliRunner, write_json, tmp_path: Path
    ) -> None:
        output = tmp_path / "vanity.dxf"
        result = runner.invoke(
            app,
            ["cutsheet", str(write_json("double.json", DOUBLE_VANITY)), "-o", str(output)],
        )

        assert result.exit_code == 0
        assert "Cut sheet written to" in result.output
        msp = ezdxf.readfile(output).modelspace()
        assert len(msp.query("CIRCLE[layer=='HOLES']")) == 4
        assert len(msp.query("LWPOLYLINE[layer=='BACKSPLASH']")) == 3

    def test_cut_sheet_settings_apply(
        self, runner: CliRunner, write_json, tmp_path: Path
    ) -> None:
        output = tmp_path / "vanity.dxf"
        settings = write_json("settings.json", {"cut_sheet": {"hole_diameter": 2}})
        result = runner.invoke(
            app,
            [
                "cutsheet",
                str(write_json("double.json", DOUBLE_VANITY)),
                "--output",
                str(output),
                "--settings",
                str(settings),
            ],
        )

        assert result.exit_code == 0
        holes = ezdxf.readfile(output).modelspace().query("CIRCLE[layer=='HOLES']")
        assert all(hole.dxf.radius == pytest.approx(1.0) for hole in holes)


class TestEncodeDecodeCommands:
    """Tests for transport field encoding and decoding."""

    def test_encode_then_decode(
        self, runner: CliRunner, write_json, tmp_path: Path
    ) -> None:
        encoded = runner.invoke(app, ["encode", str(write_json("double.json", DOUBLE_VANITY))])
        assert encoded.exit_code == 0
        fields = json.loads(encoded.output)
        assert "cfg" in fields

        fields_file = tmp_path / "fields.json"
        fields_file.write_text(encoded.output, encoding="utf-8")
        decoded = runner.invoke(app, ["decode", str(fields_file)])

        assert decoded.exit_code == 0
        assert 'Rectangle 72" x 22"' in decoded.output
        assert "Bath Rectangle (18x13)" in decoded.output
        assert "TOTAL" in decoded.output

    def test_decode_clamps_oversized_dimensions(
        self, runner: CliRunner, write_json
    ) -> None:
        oversized = Configuration(
            dimensions=RectangleDimensions(100, 30), destination_zip="63052"
        )
        fields = ConfigCodec().to_fields(oversized)

        result = runner.invoke(app, ["decode", str(write_json("fields.json", fields))])

        assert result.exit_code == 0
        assert 'Rectangle 72" x 30"' in result.output

    def test_decode_rejects_garbage(self, runner: CliRunner, write_json) -> None:
        result = runner.invoke(
            app, ["decode", str(write_json("fields.json", {"cfg": "garbage"}))]
        )

        assert result.exit_code == 1
        assert "does not hold a valid configuration" in result.output

    def test_decode_rejects_non_object(self, runner: CliRunner, write_json) -> None:
        result = runner.invoke(app, ["decode", str(write_json("fields.json", ["cfg"]))])

        assert result.exit_code == 1
        assert "must be a JSON object" in result.output

    def test_decode_unreadable_file(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "fields.json"
        bad.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["decode", str(bad)])

        assert result.exit_code == 1
        assert "cannot read metadata" in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_design(self, runner: CliRunner, write_json) -> None:
        result = runner.invoke(
            app, ["validate", str(write_json("double.json", DOUBLE_VANITY))]
        )

        assert result.exit_code == 0
        assert "Design is valid." in result.output

    def test_crowded_design_fails(self, runner: CliRunner, write_json) -> None:
        result = runner.invoke(app, ["validate", str(write_json("crowded.json", CROWDED))])

        assert result.exit_code == 1
        assert "not enough room" in result.output
        assert "Validation failed." in result.output

    def test_schema_error(self, runner: CliRunner, write_json) -> None:
        result = runner.invoke(
            app,
            ["validate", str(write_json("bad.json", {"dimensions": {"depth": 3}}))],
        )

        assert result.exit_code == 1
        assert "dimensions.depth" in result.output

    def test_invalid_json(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text('{"shape": }', encoding="utf-8")

        result = runner.invoke(app, ["validate", str(bad)])

        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output

    def test_settings_rules_apply(self, runner: CliRunner, write_json) -> None:
        settings = write_json("settings.json", {"placement": {"max_sinks": 1}})
        result = runner.invoke(
            app,
            [
                "validate",
                str(write_json("double.json", DOUBLE_VANITY)),
                "--settings",
                str(settings),
            ],
        )

        assert result.exit_code == 1
        assert "maximum number of sinks" in result.output


class TestExportCommand:
    """Tests for multi-format export."""

    def test_export_all_formats(
        self, runner: CliRunner, write_json, tmp_path: Path
    ) -> None:
        out = tmp_path / "out"
        result = runner.invoke(
            app,
            [
                "export",
                str(write_json("double.json", DOUBLE_VANITY)),
                "-d",
                str(out),
                "--project-name",
                "vanity",
            ],
        )

        assert result.exit_code == 0
        assert "Exported files:" in result.output
        assert (out / "vanity.dxf").exists()
        data = json.loads((out / "vanity.json").read_text(encoding="utf-8"))
        assert data["placement_errors"] == []
        assert len(data["design"]["sinks"]) == 2

    def test_single_format(self, runner: CliRunner, write_json, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "export",
                str(write_json("vanity.json", VANITY)),
                "--formats",
                "json",
                "--output-dir",
                str(tmp_path),
            ],
        )

        assert result.exit_code == 0
        assert (tmp_path / "countertop.json").exists()
        assert not (tmp_path / "countertop.dxf").exists()

    def test_unknown_format(self, runner: CliRunner, write_json, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "export",
                str(write_json("vanity.json", VANITY)),
                "-f",
                "dxf,svg",
                "-d",
                str(tmp_path / "out"),
            ],
        )

        assert result.exit_code == 1
        assert "Unknown formats: svg" in result.output
        assert not (tmp_path / "out").exists()
