"""JSON exporter for countertop designs.

Exports the normalized design together with its quote, placement validity
and the transport fields used at checkout, for order records and debugging.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from countertops.domain import PricingEngine, SinkPlacementEngine
from countertops.infrastructure.codec import ConfigCodec
from countertops.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from countertops.domain import Configuration


logger = logging.getLogger(__name__)


SCHEMA_VERSION = "1.0"


@ExporterRegistry.register("json")
class DesignJsonExporter:
    """Exports a design, its price breakdown and its transport fields as JSON.

    Attributes:
        format_name: "json"
        file_extension: "json"
    """

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(
        self,
        pricing_engine: PricingEngine | None = None,
        placement_engine: SinkPlacementEngine | None = None,
        codec: ConfigCodec | None = None,
        indent: int = 2,
    ) -> None:
        self.pricing_engine = pricing_engine or PricingEngine()
        self.placement_engine = placement_engine or SinkPlacementEngine()
        self.codec = codec or ConfigCodec()
        self.indent = indent

    def export(self, configuration: Configuration, path: Path) -> None:
        Path(path).write_text(self.export_string(configuration), encoding="utf-8")
        logger.info(f"Exported design JSON to {path}")

    def export_string(self, configuration: Configuration) -> str:
        return json.dumps(self.to_dict(configuration), indent=self.indent)

    def to_dict(self, configuration: Configuration) -> dict[str, Any]:
        pricing = self.pricing_engine.price(configuration)
        errors = self.placement_engine.validate(configuration)
        return {
            "schema_version": SCHEMA_VERSION,
            "design": self.codec.to_payload(configuration),
            "area_sqft": round(pricing.area_sqft, 4),
            "backsplash_sqft": round(pricing.backsplash_sqft, 4),
            "pricing": pricing.summary(),
            "total_cents": pricing.total_cents,
            "line_items": [
                {"label": label, "amount": round(amount, 2)}
                for label, amount in pricing.line_items
            ],
            "placement_errors": errors,
            "metadata": self.codec.to_fields(configuration),
        }
