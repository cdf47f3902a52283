"""Infrastructure layer - encoding, cut sheets, exporters and formatters."""

from .codec import ConfigCodec
from .cut_sheet import (
    CutSheetBuilder,
    CutSheetDocument,
    CutSheetSettings,
    describe_shape,
)
from .exporters import (
    DesignJsonExporter,
    DxfExporter,
    Exporter,
    ExporterRegistry,
    ExportManager,
    encode_attachment,
)
from .formatters import DesignSummaryFormatter, QuoteFormatter

__all__ = [
    # Transport
    "ConfigCodec",
    # Cut sheet
    "CutSheetBuilder",
    "CutSheetDocument",
    "CutSheetSettings",
    "describe_shape",
    # Exporters
    "DesignJsonExporter",
    "DxfExporter",
    "Exporter",
    "ExporterRegistry",
    "ExportManager",
    "encode_attachment",
    # Formatters
    "DesignSummaryFormatter",
    "QuoteFormatter",
]
