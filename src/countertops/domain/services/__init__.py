"""Domain services for countertop geometry, sink placement and pricing."""

from .geometry import (
    MAX_DIAMETER,
    MAX_LENGTH,
    MAX_SIDES,
    MAX_WIDTH,
    MIN_DIMENSION,
    MIN_SIDES,
    area_sqft,
    bounding_box,
    circle,
    circumscribed_diameter,
    clamp,
    clamp_dimensions,
    max_side_length,
    polygon,
    polygon_vertices,
    rectangle,
)
from .pricing import (
    PricingEngine,
    PricingRates,
    PricingResult,
    ShippingEstimate,
    is_valid_zip,
    round_cents,
    to_cents,
    zip_prefix,
)
from .sink_placement import (
    DragResult,
    PlacementResult,
    PlacementRules,
    ResnapResult,
    SinkPlacementEngine,
)

__all__ = [
    "DragResult",
    "MAX_DIAMETER",
    "MAX_LENGTH",
    "MAX_SIDES",
    "MAX_WIDTH",
    "MIN_DIMENSION",
    "MIN_SIDES",
    "PlacementResult",
    "PlacementRules",
    "PricingEngine",
    "PricingRates",
    "PricingResult",
    "ResnapResult",
    "ShippingEstimate",
    "SinkPlacementEngine",
    "area_sqft",
    "bounding_box",
    "circle",
    "circumscribed_diameter",
    "clamp",
    "clamp_dimensions",
    "is_valid_zip",
    "max_side_length",
    "polygon",
    "polygon_vertices",
    "rectangle",
    "round_cents",
    "to_cents",
    "zip_prefix",
]
