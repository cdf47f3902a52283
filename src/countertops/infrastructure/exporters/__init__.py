"""Exporter framework for countertop designs.

This package provides:
- Exporter Protocol: Defines the interface for all exporters
- ExporterRegistry: Central registry for format discovery
- ExportManager: Coordinates multi-format export operations

Registered exporters:
- dxf: DXF cut sheet for fabrication
- json: Design, quote and transport fields

Usage:
    from countertops.infrastructure.exporters import ExportManager, ExporterRegistry

    formats = ExporterRegistry.available_formats()
    dxf_exporter = ExporterRegistry.get("dxf")()

    manager = ExportManager(output_dir=Path("./output"))
    results = manager.export_all(["dxf", "json"], configuration, project_name="vanity")
"""

from countertops.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
)

# Import exporters to trigger registration
from countertops.infrastructure.exporters.design_json import DesignJsonExporter
from countertops.infrastructure.exporters.dxf import (
    LAYERS,
    DxfExporter,
    encode_attachment,
)

__all__ = [
    # Framework
    "Exporter",
    "ExporterRegistry",
    "ExportManager",
    # Registered exporters
    "DesignJsonExporter",
    "DxfExporter",
    # Helpers
    "LAYERS",
    "encode_attachment",
]
