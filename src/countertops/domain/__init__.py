"""Domain layer - countertop model and business rules."""

from .entities import DEFAULT_DIMENSIONS, Configuration, SinkPlacement, new_sink_id
from .services import (
    PlacementRules,
    PricingEngine,
    PricingRates,
    PricingResult,
    SinkPlacementEngine,
)
from .value_objects import (
    DEFAULT_COLOR,
    EDGE_ORDER,
    SINK_TEMPLATES,
    STONE_COLORS,
    CircleDimensions,
    CutoutKind,
    Dimensions,
    Edge,
    FaucetHoles,
    FaucetOption,
    FaucetSpread,
    PlacementBounds,
    PolygonDimensions,
    RectangleDimensions,
    RejectionReason,
    Shape,
    SinkTemplate,
    StoneColor,
    to_grid,
)

__all__ = [
    "CircleDimensions",
    "Configuration",
    "CutoutKind",
    "DEFAULT_COLOR",
    "DEFAULT_DIMENSIONS",
    "Dimensions",
    "EDGE_ORDER",
    "Edge",
    "FaucetHoles",
    "FaucetOption",
    "FaucetSpread",
    "PlacementBounds",
    "PlacementRules",
    "PolygonDimensions",
    "PricingEngine",
    "PricingRates",
    "PricingResult",
    "RectangleDimensions",
    "RejectionReason",
    "SINK_TEMPLATES",
    "STONE_COLORS",
    "Shape",
    "SinkPlacement",
    "SinkPlacementEngine",
    "SinkTemplate",
    "StoneColor",
    "new_sink_id",
    "to_grid",
]
