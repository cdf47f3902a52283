"""Tests for the exporter registry, ExportManager and the design JSON exporter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import ClassVar

import pytest

from countertops.domain import Configuration
from countertops.infrastructure import ConfigCodec
from countertops.infrastructure.exporters import (
    DesignJsonExporter,
    ExporterRegistry,
    ExportManager,
)


class TestExporterRegistry:
    """Tests for format registration and lookup."""

    def test_builtin_formats(self) -> None:
        assert ExporterRegistry.available_formats() == ["dxf", "json"]

    def test_unknown_format_lists_available(self) -> None:
        with pytest.raises(KeyError, match="Available formats: dxf, json"):
            ExporterRegistry.get("svg")

    def test_register_and_unregister(self) -> None:
        @ExporterRegistry.register("txt")
        class TextExporter:
            format_name: ClassVar[str] = "txt"
            file_extension: ClassVar[str] = "txt"

            def export(self, configuration: Configuration, path: Path) -> None:
                Path(path).write_text(configuration.shape.value, encoding="utf-8")

        try:
            assert ExporterRegistry.is_registered("txt")
            assert ExporterRegistry.get("txt") is TextExporter
        finally:
            ExporterRegistry.unregister("txt")
        assert not ExporterRegistry.is_registered("txt")


class TestExportManager:
    """Tests for multi-format export."""

    def test_export_all_writes_one_file_per_format(
        self, double_vanity, tmp_path: Path
    ) -> None:
        manager = ExportManager(tmp_path / "out")
        files = manager.export_all(["dxf", "json"], double_vanity, "vanity")

        assert files == {
            "dxf": tmp_path / "out" / "vanity.dxf",
            "json": tmp_path / "out" / "vanity.json",
        }
        assert all(path.exists() for path in files.values())

    def test_unknown_format_writes_nothing(self, double_vanity, tmp_path: Path) -> None:
        manager = ExportManager(tmp_path / "out")
        with pytest.raises(KeyError):
            manager.export_all(["dxf", "svg"], double_vanity)
        assert not (tmp_path / "out").exists()

    def test_exporter_options_reach_constructor(
        self, double_vanity, tmp_path: Path
    ) -> None:
        manager = ExportManager(tmp_path, exporter_options={"json": {"indent": 4}})
        path = manager.export_single("json", double_vanity)
        assert path.name == "countertop.json"
        assert '\n    "schema_version"' in path.read_text(encoding="utf-8")


class TestDesignJsonExporter:
    """Tests for the design JSON export."""

    def test_contents(self, double_vanity, pricing_engine) -> None:
        data = DesignJsonExporter().to_dict(double_vanity)
        pricing = pricing_engine.price(double_vanity)

        assert data["schema_version"] == "1.0"
        assert data["design"]["shape"] == "rectangle"
        assert data["total_cents"] == pricing.total_cents
        assert data["pricing"] == pricing.summary()
        assert data["placement_errors"] == []
        assert [item["label"] for item in data["line_items"]][0].startswith("Stone")

    def test_metadata_decodes_to_design(self, double_vanity) -> None:
        data = DesignJsonExporter().to_dict(double_vanity)
        assert ConfigCodec().from_fields(data["metadata"]) == double_vanity

    def test_export_string_is_json(self, default_config) -> None:
        text = DesignJsonExporter().export_string(default_config)
        assert json.loads(text)["area_sqft"] == 6.375
