"""Tests for the DXF cut sheet exporter."""

from __future__ import annotations

import base64
import io
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import ezdxf
import pytest

from countertops.domain import CircleDimensions, Configuration, Shape
from countertops.infrastructure.cut_sheet import CutSheetSettings
from countertops.infrastructure.exporters import (
    LAYERS,
    DxfExporter,
    Exporter,
    ExporterRegistry,
    encode_attachment,
)


def read_dxf(text: str):
    return ezdxf.read(io.StringIO(text))


@pytest.fixture
def exporter() -> DxfExporter:
    return DxfExporter()


class TestDxfExporterRegistration:
    """Tests for registry integration."""

    def test_registered_as_dxf(self) -> None:
        assert ExporterRegistry.get("dxf") is DxfExporter

    def test_satisfies_exporter_protocol(self, exporter) -> None:
        assert isinstance(exporter, Exporter)
        assert exporter.file_extension == "dxf"


class TestDxfContent:
    """Tests for the emitted DXF document."""

    def test_units_are_inches(self, exporter, double_vanity) -> None:
        doc = read_dxf(exporter.export_string(double_vanity))
        assert doc.header["$INSUNITS"] == 1

    def test_all_layers_are_defined(self, exporter, default_config) -> None:
        doc = read_dxf(exporter.export_string(default_config))
        for name, props in LAYERS.items():
            assert name in doc.layers
            assert doc.layers.get(name).color == props["color"]

    def test_entities_land_on_their_layers(self, exporter, double_vanity) -> None:
        msp = read_dxf(exporter.export_string(double_vanity)).modelspace()

        assert len(msp.query("LWPOLYLINE[layer=='OUTLINE']")) == 1
        assert len(msp.query("LINE[layer=='POLISHED']")) == 1
        assert len(msp.query("LWPOLYLINE[layer=='BACKSPLASH']")) == 3
        assert len(msp.query("ELLIPSE[layer=='CUTOUT']")) == 1
        assert len(msp.query("LWPOLYLINE[layer=='CUTOUT']")) == 1
        assert len(msp.query("CIRCLE[layer=='HOLES']")) == 4
        assert len(msp.query("TEXT[layer=='TEXT']")) == 2

    def test_outline_vertices(self, exporter, polished_vanity) -> None:
        msp = read_dxf(exporter.export_string(polished_vanity)).modelspace()
        (outline,) = msp.query("LWPOLYLINE[layer=='OUTLINE']")
        assert outline.closed
        points = [(x, y) for x, y in outline.get_points("xy")]
        assert points == [(0, 0), (36, 0), (36, 25.5), (0, 25.5)]

    def test_hole_geometry(self, exporter, double_vanity) -> None:
        msp = read_dxf(exporter.export_string(double_vanity)).modelspace()
        holes = msp.query("CIRCLE[layer=='HOLES']")
        centers = [(h.dxf.center.x, h.dxf.center.y) for h in holes]
        assert centers == [(32, 20), (36, 20), (40, 20), (57.5, 19.5)]
        assert all(h.dxf.radius == pytest.approx(0.625) for h in holes)

    def test_annotation_text(self, exporter, double_vanity) -> None:
        msp = read_dxf(exporter.export_string(double_vanity)).modelspace()
        texts = [t.dxf.text for t in msp.query("TEXT")]
        assert texts == ['Rectangle 72" x 22"', "Polished edges: Bottom"]

    def test_circle_slab(self, exporter) -> None:
        config = Configuration(shape=Shape.CIRCLE, dimensions=CircleDimensions(30))
        msp = read_dxf(exporter.export_string(config)).modelspace()
        (outline,) = msp.query("CIRCLE[layer=='OUTLINE']")
        assert outline.dxf.radius == pytest.approx(15)

    def test_settings_are_applied(self, double_vanity) -> None:
        exporter = DxfExporter(CutSheetSettings(hole_diameter=2.0))
        msp = read_dxf(exporter.export_string(double_vanity)).modelspace()
        assert all(
            h.dxf.radius == pytest.approx(1.0)
            for h in msp.query("CIRCLE[layer=='HOLES']")
        )


class TestDeterminism:
    """The same configuration always yields the same text."""

    def test_repeated_exports_are_identical(self, exporter, double_vanity) -> None:
        assert exporter.export_string(double_vanity) == exporter.export_string(
            double_vanity
        )

    def test_separate_exporters_are_identical(self, double_vanity) -> None:
        assert DxfExporter().export_string(double_vanity) == DxfExporter().export_string(
            double_vanity
        )

    def test_fixed_metadata_flag_is_restored(self, exporter, default_config) -> None:
        before = ezdxf.options.write_fixed_meta_data_for_testing
        exporter.export_string(default_config)
        assert ezdxf.options.write_fixed_meta_data_for_testing == before

    def test_concurrent_exports_are_identical(self, double_vanity) -> None:
        """Renders on several threads all see the fixed metadata switch."""
        before = ezdxf.options.write_fixed_meta_data_for_testing
        expected = DxfExporter().export_string(double_vanity)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(
                pool.map(
                    lambda _: DxfExporter().export_string(double_vanity), range(32)
                )
            )

        assert all(text == expected for text in results)
        assert ezdxf.options.write_fixed_meta_data_for_testing == before


class TestFileExport:
    """Tests for writing files and attachments."""

    def test_export_writes_same_text(self, exporter, double_vanity, tmp_path: Path) -> None:
        path = tmp_path / "vanity.dxf"
        exporter.export(double_vanity, path)
        assert path.read_text(encoding="utf-8") == exporter.export_string(double_vanity)

    def test_exported_file_reads_back(self, exporter, double_vanity, tmp_path: Path) -> None:
        path = tmp_path / "vanity.dxf"
        exporter.export(double_vanity, path)
        doc = ezdxf.readfile(path)
        assert len(doc.modelspace().query("ELLIPSE")) == 1

    def test_attachment_is_standard_base64(self, exporter, default_config) -> None:
        text = exporter.export_string(default_config)
        encoded = encode_attachment(text)
        assert base64.b64decode(encoded).decode("utf-8") == text
