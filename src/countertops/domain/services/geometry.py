"""Slab geometry: dimension limits, clamping, areas and bounding boxes.

Out-of-range input is clamped rather than rejected so that every keystroke in
the editor still yields a drawable slab.
"""

from __future__ import annotations

import math

from ..value_objects import (
    CircleDimensions,
    Dimensions,
    PolygonDimensions,
    RectangleDimensions,
)

__all__ = [
    "MAX_DIAMETER",
    "MAX_LENGTH",
    "MAX_SIDES",
    "MAX_WIDTH",
    "MIN_DIMENSION",
    "MIN_SIDES",
    "SQIN_PER_SQFT",
    "area_sqft",
    "bounding_box",
    "circumscribed_diameter",
    "clamp",
    "clamp_dimensions",
    "circle",
    "max_side_length",
    "polygon",
    "polygon_vertices",
    "rectangle",
]

MAX_LENGTH = 72.0  # Rectangle L
MAX_WIDTH = 62.0  # Rectangle W
MAX_DIAMETER = 62.0  # Circle diameter and polygon circumdiameter cap
MIN_DIMENSION = 1.0
MIN_SIDES = 5
MAX_SIDES = 18
DEFAULT_SIDES = 6
DEFAULT_SIDE_LENGTH = 12.0

SQIN_PER_SQFT = 144.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]; NaN clamps to low."""
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def max_side_length(side_count: int) -> float:
    """Longest side that keeps the polygon's circumdiameter within MAX_DIAMETER."""
    return MAX_DIAMETER * math.sin(math.pi / side_count)


def circumscribed_diameter(side_count: int, side_length: float) -> float:
    """Diameter of the circle passing through every polygon vertex."""
    return side_length / math.sin(math.pi / side_count)


def _clamp_side_count(side_count: float) -> int:
    if isinstance(side_count, float) and math.isnan(side_count):
        return DEFAULT_SIDES
    return int(clamp(round(side_count), MIN_SIDES, MAX_SIDES))


def clamp_dimensions(dimensions: Dimensions) -> Dimensions:
    """Return the dimensions with every value clamped into its legal range."""
    if isinstance(dimensions, RectangleDimensions):
        return RectangleDimensions(
            length=clamp(dimensions.length, MIN_DIMENSION, MAX_LENGTH),
            width=clamp(dimensions.width, MIN_DIMENSION, MAX_WIDTH),
        )
    if isinstance(dimensions, CircleDimensions):
        return CircleDimensions(
            diameter=clamp(dimensions.diameter, MIN_DIMENSION, MAX_DIAMETER)
        )
    if isinstance(dimensions, PolygonDimensions):
        sides = _clamp_side_count(dimensions.side_count)
        return PolygonDimensions(
            side_count=sides,
            side_length=clamp(
                dimensions.side_length, MIN_DIMENSION, max_side_length(sides)
            ),
        )
    raise TypeError(f"Unsupported dimensions: {type(dimensions).__name__}")


def rectangle(length: float, width: float) -> RectangleDimensions:
    """Build clamped rectangle dimensions from raw editor input."""
    return RectangleDimensions(
        length=clamp(length, MIN_DIMENSION, MAX_LENGTH),
        width=clamp(width, MIN_DIMENSION, MAX_WIDTH),
    )


def circle(diameter: float) -> CircleDimensions:
    """Build clamped circle dimensions from raw editor input."""
    return CircleDimensions(diameter=clamp(diameter, MIN_DIMENSION, MAX_DIAMETER))


def polygon(
    side_count: float | None = None, side_length: float | None = None
) -> PolygonDimensions:
    """Build clamped polygon dimensions; missing values fall back to 6 x 12in."""
    sides = _clamp_side_count(DEFAULT_SIDES if side_count is None else side_count)
    length = DEFAULT_SIDE_LENGTH if side_length is None else side_length
    return PolygonDimensions(
        side_count=sides,
        side_length=clamp(length, MIN_DIMENSION, max_side_length(sides)),
    )


def area_sqft(dimensions: Dimensions) -> float:
    """Slab top area in square feet."""
    if isinstance(dimensions, RectangleDimensions):
        return dimensions.length * dimensions.width / SQIN_PER_SQFT
    if isinstance(dimensions, CircleDimensions):
        return math.pi * (dimensions.diameter / 2) ** 2 / SQIN_PER_SQFT
    if isinstance(dimensions, PolygonDimensions):
        n = dimensions.side_count
        a = dimensions.side_length
        return (n * a * a) / (4 * math.tan(math.pi / n)) / SQIN_PER_SQFT
    raise TypeError(f"Unsupported dimensions: {type(dimensions).__name__}")


def polygon_vertices(dimensions: PolygonDimensions) -> list[tuple[float, float]]:
    """Vertices of the regular polygon, shifted so its bounding box starts at 0,0.

    The first vertex lies on the positive x axis of the circumcircle and the
    rest follow counter-clockwise.
    """
    n = dimensions.side_count
    radius = dimensions.circumradius
    ring = [
        (radius * math.cos(i * 2 * math.pi / n), radius * math.sin(i * 2 * math.pi / n))
        for i in range(n)
    ]
    min_x = min(x for x, _ in ring)
    min_y = min(y for _, y in ring)
    return [(x - min_x, y - min_y) for x, y in ring]


def bounding_box(dimensions: Dimensions) -> tuple[float, float]:
    """Width and height of the slab's axis-aligned bounding box."""
    if isinstance(dimensions, RectangleDimensions):
        return dimensions.length, dimensions.width
    if isinstance(dimensions, CircleDimensions):
        return dimensions.diameter, dimensions.diameter
    if isinstance(dimensions, PolygonDimensions):
        vertices = polygon_vertices(dimensions)
        return max(x for x, _ in vertices), max(y for _, y in vertices)
    raise TypeError(f"Unsupported dimensions: {type(dimensions).__name__}")
