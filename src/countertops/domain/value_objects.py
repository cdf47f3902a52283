"""Value objects for the countertop domain.

Immutable data types shared by geometry, sink placement, pricing and the cut
sheet builder. All lengths are in inches.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Union


class Shape(str, Enum):
    """Slab outline variants."""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    POLYGON = "polygon"


class Edge(str, Enum):
    """Rectangle slab edges, named as seen from above."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


# Canonical edge order used for encoding, pricing and drawing
EDGE_ORDER: tuple[Edge, ...] = (Edge.TOP, Edge.RIGHT, Edge.BOTTOM, Edge.LEFT)


def ordered_edges(edges: frozenset[Edge] | set[Edge]) -> list[Edge]:
    """Return edges in canonical top/right/bottom/left order."""
    return [edge for edge in EDGE_ORDER if edge in edges]


class CutoutKind(str, Enum):
    """Cutout outline drawn for a sink template."""

    OVAL = "oval"
    RECT = "rect"


class FaucetHoles(int, Enum):
    """Number of faucet holes drilled behind a sink."""

    ONE = 1
    THREE = 3


class FaucetSpread(int, Enum):
    """Center-to-center distance between outer holes of a 3-hole faucet."""

    FOUR = 4
    EIGHT = 8


class RejectionReason(str, Enum):
    """Why an editor command left the configuration unchanged.

    Attributes:
        NOT_RECTANGLE: Edges, backsplash and sinks only apply to rectangles.
        UNKNOWN_TEMPLATE: Sink template key is not in the catalog.
        UNKNOWN_SINK: No placed sink has the given id.
        UNKNOWN_COLOR: Stone color key is not in the catalog.
        DOES_NOT_FIT: Template cannot fit the slab with edge clearance.
        NO_ROOM_FOR_SECOND: Template fits, but not beside the first sink.
        AT_CAPACITY: The slab already carries the maximum number of sinks.
    """

    NOT_RECTANGLE = "not_rectangle"
    UNKNOWN_TEMPLATE = "unknown_template"
    UNKNOWN_SINK = "unknown_sink"
    UNKNOWN_COLOR = "unknown_color"
    DOES_NOT_FIT = "does_not_fit"
    NO_ROOM_FOR_SECOND = "no_room_for_second"
    AT_CAPACITY = "at_capacity"


@dataclass(frozen=True)
class RectangleDimensions:
    """Rectangle slab size: length (x axis) by width (y axis)."""

    length: float
    width: float

    def __post_init__(self) -> None:
        if not self.length > 0 or not self.width > 0:
            raise ValueError("Rectangle length and width must be positive")

    def length_of(self, edge: Edge) -> float:
        """Length of a given edge: top/bottom run along L, left/right along W."""
        if edge in (Edge.TOP, Edge.BOTTOM):
            return self.length
        return self.width


@dataclass(frozen=True)
class CircleDimensions:
    """Round slab size."""

    diameter: float

    def __post_init__(self) -> None:
        if not self.diameter > 0:
            raise ValueError("Circle diameter must be positive")


@dataclass(frozen=True)
class PolygonDimensions:
    """Regular polygon slab size.

    Attributes:
        side_count: Number of sides (n).
        side_length: Length of one side (A) in inches.
    """

    side_count: int
    side_length: float

    def __post_init__(self) -> None:
        if self.side_count < 3:
            raise ValueError("A polygon needs at least 3 sides")
        if not self.side_length > 0:
            raise ValueError("Polygon side length must be positive")

    @property
    def circumradius(self) -> float:
        """Radius of the circle through every vertex."""
        return self.side_length / (2 * math.sin(math.pi / self.side_count))


Dimensions = Union[RectangleDimensions, CircleDimensions, PolygonDimensions]

DIMENSIONS_BY_SHAPE: dict[Shape, type] = {
    Shape.RECTANGLE: RectangleDimensions,
    Shape.CIRCLE: CircleDimensions,
    Shape.POLYGON: PolygonDimensions,
}


@dataclass(frozen=True)
class SinkTemplate:
    """Catalog entry for an undermount sink.

    Attributes:
        key: Catalog key (e.g. "bath-oval").
        label: Display label.
        width: Footprint along the slab length in inches.
        height: Footprint along the slab width in inches.
        kind: Cutout outline (oval or rectangle).
        price: Fabrication add-on price in dollars.
    """

    key: str
    label: str
    width: float
    height: float
    kind: CutoutKind
    price: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Sink footprint must be positive")
        if self.price < 0:
            raise ValueError("Sink price must be non-negative")


SINK_TEMPLATES: dict[str, SinkTemplate] = {
    "bath-oval": SinkTemplate(
        key="bath-oval",
        label="Bath Oval (17x14)",
        width=17.0,
        height=14.0,
        kind=CutoutKind.OVAL,
        price=80.0,
    ),
    "bath-rect": SinkTemplate(
        key="bath-rect",
        label="Bath Rectangle (18x13)",
        width=18.0,
        height=13.0,
        kind=CutoutKind.RECT,
        price=95.0,
    ),
    "kitchen-rect": SinkTemplate(
        key="kitchen-rect",
        label="Kitchen Stainless (22x16)",
        width=22.0,
        height=16.0,
        kind=CutoutKind.RECT,
        price=150.0,
    ),
}


@dataclass(frozen=True)
class StoneColor:
    """Stone slab color offered in the catalog."""

    key: str
    name: str


STONE_COLORS: dict[str, StoneColor] = {
    color.key: color
    for color in (
        StoneColor("laurent", "Laurent"),
        StoneColor("rem", "Rem"),
        StoneColor("bergen", "Bergen"),
        StoneColor("kreta", "Kreta"),
        StoneColor("sirius", "Sirius"),
        StoneColor("kairos", "Kairos"),
    )
}

DEFAULT_COLOR = "bergen"


@dataclass(frozen=True)
class FaucetOption:
    """Faucet drilling behind a sink.

    A spread only exists for 3-hole faucets, and a 3-hole faucet always has one.
    """

    holes: FaucetHoles = FaucetHoles.ONE
    spread: FaucetSpread | None = None

    def __post_init__(self) -> None:
        if self.holes == FaucetHoles.ONE and self.spread is not None:
            raise ValueError("A single-hole faucet has no spread")
        if self.holes == FaucetHoles.THREE and self.spread is None:
            raise ValueError("A 3-hole faucet requires a spread of 4 or 8 inches")

    @classmethod
    def single(cls) -> "FaucetOption":
        """Single centered hole."""
        return cls()

    @classmethod
    def three_hole(cls, spread: FaucetSpread = FaucetSpread.FOUR) -> "FaucetOption":
        """Three holes at the given spread."""
        return cls(holes=FaucetHoles.THREE, spread=spread)


# Sink centers are stored on this grid so the transport encoding is lossless
POSITION_GRID = Decimal("0.01")


def to_grid(value: float, rounding: str = ROUND_HALF_UP) -> float:
    """Round a length to the position grid (half up unless told otherwise)."""
    return float(Decimal(repr(value)).quantize(POSITION_GRID, rounding=rounding))


@dataclass(frozen=True)
class PlacementBounds:
    """Rectangle of legal sink centers for one template on one slab."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def is_degenerate(self) -> bool:
        """True when no center satisfies the edge clearance."""
        return self.x_min > self.x_max or self.y_min > self.y_max

    @property
    def center(self) -> tuple[float, float]:
        return ((self.x_min + self.x_max) / 2, (self.y_min + self.y_max) / 2)

    @property
    def corners(self) -> tuple[tuple[float, float], ...]:
        return (
            (self.x_min, self.y_min),
            (self.x_min, self.y_max),
            (self.x_max, self.y_min),
            (self.x_max, self.y_max),
        )

    def clamp(self, x: float, y: float) -> tuple[float, float]:
        """Move a point into the bounds; NaN moves to the lower limit."""
        return (
            self.x_min if math.isnan(x) else max(self.x_min, min(self.x_max, x)),
            self.y_min if math.isnan(y) else max(self.y_min, min(self.y_max, y)),
        )

    def contains(self, x: float, y: float, tolerance: float = 0.0) -> bool:
        return (
            self.x_min - tolerance <= x <= self.x_max + tolerance
            and self.y_min - tolerance <= y <= self.y_max + tolerance
        )

    def on_grid(self) -> PlacementBounds:
        """The largest bounds inside these whose limits lie on the position grid.

        The result is degenerate when no grid point satisfies the clearance.
        """
        return PlacementBounds(
            x_min=to_grid(self.x_min, ROUND_CEILING),
            x_max=to_grid(self.x_max, ROUND_FLOOR),
            y_min=to_grid(self.y_min, ROUND_CEILING),
            y_max=to_grid(self.y_max, ROUND_FLOOR),
        )

    def snap(self, x: float, y: float) -> tuple[float, float] | None:
        """Nearest grid point inside the bounds, or None if there is none.

        The point is clamped first, so NaN lands on the lower limit.
        """
        grid = self.on_grid()
        if grid.is_degenerate:
            return None
        x, y = self.clamp(x, y)
        return grid.clamp(to_grid(x), to_grid(y))
