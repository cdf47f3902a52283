"""Domain entities for countertop configuration."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace

from .value_objects import (
    DEFAULT_COLOR,
    DIMENSIONS_BY_SHAPE,
    SINK_TEMPLATES,
    CircleDimensions,
    Dimensions,
    Edge,
    FaucetOption,
    PolygonDimensions,
    RectangleDimensions,
    Shape,
    SinkTemplate,
)

# Dimensions installed when the buyer picks a shape
DEFAULT_DIMENSIONS: dict[Shape, Dimensions] = {
    Shape.RECTANGLE: RectangleDimensions(length=36.0, width=25.5),
    Shape.CIRCLE: CircleDimensions(diameter=30.0),
    Shape.POLYGON: PolygonDimensions(side_count=6, side_length=12.0),
}


def new_sink_id() -> str:
    """Short random identifier for a placed sink."""
    return uuid.uuid4().hex[:7]


@dataclass(frozen=True)
class SinkPlacement:
    """A sink cutout placed on a rectangular slab.

    Attributes:
        sink_id: Stable identifier; never renumbered when other sinks go away.
        template_key: Key into SINK_TEMPLATES.
        x: Cutout center from the slab's left edge in inches.
        y: Cutout center from the slab's bottom edge in inches.
        faucet: Faucet hole option drilled behind the cutout.
    """

    sink_id: str
    template_key: str
    x: float
    y: float
    faucet: FaucetOption = field(default_factory=FaucetOption)

    def __post_init__(self) -> None:
        if not self.sink_id:
            raise ValueError("sink_id must not be empty")
        if self.template_key not in SINK_TEMPLATES:
            raise ValueError(f"Unknown sink template: {self.template_key}")

    @property
    def template(self) -> SinkTemplate:
        return SINK_TEMPLATES[self.template_key]

    def moved_to(self, x: float, y: float) -> "SinkPlacement":
        """Copy of this placement centered at a new position."""
        return replace(self, x=x, y=y)


@dataclass(frozen=True)
class Configuration:
    """A complete countertop design owned by one editing session.

    The configuration is immutable: editor commands return a new instance.
    Edge finish, backsplash and sinks only carry meaning for rectangles and
    must be empty for the other shapes.

    Attributes:
        shape: Slab outline variant.
        dimensions: Dimensions matching the shape variant.
        polished_edges: Edges finished smooth (rectangle only).
        backsplash: Whether backsplash strips are cut for unpolished edges.
        sinks: Placed sinks in the order they were added (0 to 2).
        color_key: Stone color selector.
        destination_zip: Shipping destination ZIP code.
    """

    shape: Shape = Shape.RECTANGLE
    dimensions: Dimensions = field(
        default_factory=lambda: DEFAULT_DIMENSIONS[Shape.RECTANGLE]
    )
    polished_edges: frozenset[Edge] = frozenset()
    backsplash: bool = False
    sinks: tuple[SinkPlacement, ...] = ()
    color_key: str = DEFAULT_COLOR
    destination_zip: str = ""

    def __post_init__(self) -> None:
        expected = DIMENSIONS_BY_SHAPE[self.shape]
        if not isinstance(self.dimensions, expected):
            raise ValueError(
                f"{self.shape.value} requires {expected.__name__}, "
                f"got {type(self.dimensions).__name__}"
            )
        if self.shape != Shape.RECTANGLE:
            if self.polished_edges or self.backsplash or self.sinks:
                raise ValueError(
                    "Polished edges, backsplash and sinks apply to rectangles only"
                )
        ids = [sink.sink_id for sink in self.sinks]
        if len(ids) != len(set(ids)):
            raise ValueError("Sink ids must be unique")

    @property
    def is_rectangle(self) -> bool:
        return self.shape == Shape.RECTANGLE

    def sink(self, sink_id: str) -> SinkPlacement | None:
        """Look up a placed sink by id."""
        for placement in self.sinks:
            if placement.sink_id == sink_id:
                return placement
        return None

    def with_sinks(self, sinks: tuple[SinkPlacement, ...]) -> "Configuration":
        return replace(self, sinks=sinks)

    def replacing_sink(self, placement: SinkPlacement) -> "Configuration":
        """Swap in an updated placement with the same id, keeping order."""
        return self.with_sinks(
            tuple(
                placement if existing.sink_id == placement.sink_id else existing
                for existing in self.sinks
            )
        )
