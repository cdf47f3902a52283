"""DXF format exporter for countertop cut sheets.

Writes the cut sheet document as a 2D DXF (R2010, inches) for the
fabrication shop's CNC saw and waterjet. Output is deterministic: the same
configuration always produces byte-identical text.
"""

from __future__ import annotations

import base64
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

import ezdxf
from ezdxf import units

from countertops.infrastructure.cut_sheet import (
    CircleEntity,
    CutSheetBuilder,
    CutSheetDocument,
    CutSheetSettings,
    EllipseEntity,
    LineEntity,
    PolylineEntity,
    TextEntity,
)
from countertops.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from ezdxf.document import Drawing
    from ezdxf.layouts import Modelspace

    from countertops.domain import Configuration


logger = logging.getLogger(__name__)


# Layer configuration for DXF output
LAYERS = {
    "OUTLINE": {"color": 7},  # White - slab perimeter cut
    "POLISHED": {"color": 4},  # Cyan - edges to polish
    "BACKSPLASH": {"color": 3},  # Green - backsplash strips
    "CUTOUT": {"color": 1},  # Red - sink cutouts
    "HOLES": {"color": 6},  # Magenta - faucet holes
    "TEXT": {"color": 5},  # Blue - annotations
}


# ezdxf keeps the fixed-metadata switch in process-wide options
_METADATA_LOCK = threading.Lock()


@contextmanager
def fixed_metadata() -> Iterator[None]:
    """Have ezdxf write fixed timestamps and GUIDs while the block runs.

    Blocks are serialized on a lock, so concurrent renders cannot restore
    the switch under one another.
    """
    with _METADATA_LOCK:
        previous = ezdxf.options.write_fixed_meta_data_for_testing
        ezdxf.options.write_fixed_meta_data_for_testing = True
        try:
            yield
        finally:
            ezdxf.options.write_fixed_meta_data_for_testing = previous


def encode_attachment(dxf_text: str) -> str:
    """Base64 of the UTF-8 DXF text, for email attachments."""
    return base64.b64encode(dxf_text.encode("utf-8")).decode("ascii")


@ExporterRegistry.register("dxf")
class DxfExporter:
    """Exports countertop configurations to DXF cut sheets.

    Attributes:
        format_name: "dxf"
        file_extension: "dxf"
    """

    format_name: ClassVar[str] = "dxf"
    file_extension: ClassVar[str] = "dxf"

    def __init__(self, settings: CutSheetSettings | None = None) -> None:
        self.builder = CutSheetBuilder(settings)

    def export(self, configuration: Configuration, path: Path) -> None:
        """Write the configuration's cut sheet to a DXF file."""
        Path(path).write_text(self.export_string(configuration), encoding="utf-8")
        logger.info(f"Exported DXF cut sheet to {path}")

    def export_string(self, configuration: Configuration) -> str:
        """Cut sheet for the configuration as DXF text."""
        return self.render(self.builder.build(configuration))

    def render(self, document: CutSheetDocument) -> str:
        """Emit a prebuilt cut sheet document as DXF text."""
        with fixed_metadata():
            doc = self._create_document()
            msp = doc.modelspace()
            for entity in document.entities:
                self._draw(msp, entity)
            stream = StringIO()
            doc.write(stream)
        return stream.getvalue()

    def _create_document(self) -> Drawing:
        doc = ezdxf.new("R2010")
        doc.units = units.IN
        for name, props in LAYERS.items():
            doc.layers.add(name, color=props["color"])
        return doc

    def _draw(self, msp: Modelspace, entity: object) -> None:
        if isinstance(entity, PolylineEntity):
            msp.add_lwpolyline(
                entity.points, close=entity.closed, dxfattribs={"layer": entity.layer}
            )
        elif isinstance(entity, CircleEntity):
            msp.add_circle(
                entity.center, entity.radius, dxfattribs={"layer": entity.layer}
            )
        elif isinstance(entity, EllipseEntity):
            msp.add_ellipse(
                entity.center,
                major_axis=entity.major_axis,
                ratio=entity.ratio,
                dxfattribs={"layer": entity.layer},
            )
        elif isinstance(entity, LineEntity):
            msp.add_line(entity.start, entity.end, dxfattribs={"layer": entity.layer})
        elif isinstance(entity, TextEntity):
            msp.add_text(
                entity.text,
                height=entity.height,
                dxfattribs={"layer": entity.layer, "insert": entity.insert},
            )
        else:
            raise TypeError(f"Unsupported cut sheet entity: {type(entity).__name__}")


__all__ = ["DxfExporter", "LAYERS", "encode_attachment", "fixed_metadata"]
