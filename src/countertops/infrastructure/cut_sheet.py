"""Cut sheet document model.

The builder turns a Configuration into an ordered list of typed drawing
entities in inches, with the slab's bounding box starting at the origin. The
DXF exporter writes those entities in a single pass, so everything that
decides what gets drawn lives here and the emitter stays mechanical.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from countertops.domain import (
    EDGE_ORDER,
    CircleDimensions,
    Configuration,
    CutoutKind,
    Edge,
    FaucetHoles,
    PolygonDimensions,
    RectangleDimensions,
    SinkPlacement,
)
from countertops.domain.services import bounding_box, polygon_vertices

__all__ = [
    "CircleEntity",
    "CutSheetBuilder",
    "CutSheetDocument",
    "CutSheetEntity",
    "CutSheetSettings",
    "EllipseEntity",
    "LAYER_BACKSPLASH",
    "LAYER_CUTOUT",
    "LAYER_HOLES",
    "LAYER_OUTLINE",
    "LAYER_POLISHED",
    "LAYER_TEXT",
    "LineEntity",
    "PolylineEntity",
    "TextEntity",
    "describe_shape",
]

LAYER_OUTLINE = "OUTLINE"
LAYER_POLISHED = "POLISHED"
LAYER_BACKSPLASH = "BACKSPLASH"
LAYER_CUTOUT = "CUTOUT"
LAYER_HOLES = "HOLES"
LAYER_TEXT = "TEXT"

COORDINATE_PRECISION = 4

Point = tuple[float, float]


def _r(value: float) -> float:
    # + 0.0 folds -0.0 into 0.0 so the emitted text never varies by sign
    return round(value, COORDINATE_PRECISION) + 0.0


def _pt(x: float, y: float) -> Point:
    return (_r(x), _r(y))


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class PolylineEntity:
    layer: str
    points: tuple[Point, ...]
    closed: bool = True


@dataclass(frozen=True)
class CircleEntity:
    layer: str
    center: Point
    radius: float


@dataclass(frozen=True)
class EllipseEntity:
    """Ellipse given by its center, major axis vector and minor/major ratio."""

    layer: str
    center: Point
    major_axis: Point
    ratio: float


@dataclass(frozen=True)
class LineEntity:
    layer: str
    start: Point
    end: Point


@dataclass(frozen=True)
class TextEntity:
    layer: str
    text: str
    insert: Point
    height: float


CutSheetEntity = Union[PolylineEntity, CircleEntity, EllipseEntity, LineEntity, TextEntity]


@dataclass(frozen=True)
class CutSheetSettings:
    """Fabrication constants for the cut sheet.

    Attributes:
        hole_diameter: Faucet hole diameter.
        hole_setback: Distance from the cutout's back edge to the hole centers.
        cutout_shrink: Amount taken off each cutout dimension for the reveal.
        backsplash_gap: Spacing between the slab and a backsplash strip.
        backsplash_depth: Height of a backsplash strip.
        text_height: Annotation text height.
    """

    hole_diameter: float = 1.25
    hole_setback: float = 2.0
    cutout_shrink: float = 0.0
    backsplash_gap: float = 1.0
    backsplash_depth: float = 4.0
    text_height: float = 0.35

    def __post_init__(self) -> None:
        if self.hole_diameter <= 0:
            raise ValueError("hole_diameter must be positive")
        if self.text_height <= 0:
            raise ValueError("text_height must be positive")
        for name in ("hole_setback", "cutout_shrink", "backsplash_gap", "backsplash_depth"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class CutSheetDocument:
    """Ordered drawing entities for one slab, plus its bounding box."""

    width: float
    height: float
    entities: tuple[CutSheetEntity, ...] = field(default_factory=tuple)

    def on_layer(self, layer: str) -> list[CutSheetEntity]:
        return [entity for entity in self.entities if entity.layer == layer]

    @property
    def layers(self) -> list[str]:
        """Layers in first-use order."""
        seen: list[str] = []
        for entity in self.entities:
            if entity.layer not in seen:
                seen.append(entity.layer)
        return seen


class CutSheetBuilder:
    """Builds the cut sheet document for a configuration.

    Entities are emitted in a fixed order: outline, polished edges,
    backsplash strips, each sink's cutout followed by its faucet holes, then
    annotations.
    """

    def __init__(self, settings: CutSheetSettings | None = None) -> None:
        self.settings = settings or CutSheetSettings()

    def build(self, configuration: Configuration) -> CutSheetDocument:
        width, height = bounding_box(configuration.dimensions)
        entities: list[CutSheetEntity] = []
        entities.extend(self._outline(configuration))

        dims = configuration.dimensions
        if isinstance(dims, RectangleDimensions):
            entities.extend(self._polished_edges(configuration, dims))
            if configuration.backsplash:
                entities.extend(self._backsplash(configuration, dims))
            for placement in configuration.sinks:
                entities.extend(self._sink(placement))

        entities.extend(self._annotations(configuration, width, height))
        return CutSheetDocument(
            width=_r(width), height=_r(height), entities=tuple(entities)
        )

    def _outline(self, configuration: Configuration) -> list[CutSheetEntity]:
        dims = configuration.dimensions
        if isinstance(dims, RectangleDimensions):
            return [_rectangle(LAYER_OUTLINE, 0.0, 0.0, dims.length, dims.width)]
        if isinstance(dims, CircleDimensions):
            radius = dims.diameter / 2
            return [CircleEntity(LAYER_OUTLINE, _pt(radius, radius), _r(radius))]
        if isinstance(dims, PolygonDimensions):
            points = tuple(_pt(x, y) for x, y in polygon_vertices(dims))
            return [PolylineEntity(LAYER_OUTLINE, points, closed=True)]
        raise TypeError(f"Unsupported dimensions: {type(dims).__name__}")

    def _polished_edges(
        self, configuration: Configuration, dims: RectangleDimensions
    ) -> list[CutSheetEntity]:
        length, width = dims.length, dims.width
        segments = {
            Edge.TOP: ((0.0, width), (length, width)),
            Edge.RIGHT: ((length, 0.0), (length, width)),
            Edge.BOTTOM: ((0.0, 0.0), (length, 0.0)),
            Edge.LEFT: ((0.0, 0.0), (0.0, width)),
        }
        return [
            LineEntity(LAYER_POLISHED, _pt(*segments[edge][0]), _pt(*segments[edge][1]))
            for edge in EDGE_ORDER
            if edge in configuration.polished_edges
        ]

    def _backsplash(
        self, configuration: Configuration, dims: RectangleDimensions
    ) -> list[CutSheetEntity]:
        gap = self.settings.backsplash_gap
        depth = self.settings.backsplash_depth
        length, width = dims.length, dims.width
        strips = {
            Edge.TOP: (0.0, width + gap, length, depth),
            Edge.RIGHT: (length + gap, 0.0, depth, width),
            Edge.BOTTOM: (0.0, -gap - depth, length, depth),
            Edge.LEFT: (-gap - depth, 0.0, depth, width),
        }
        return [
            _rectangle(LAYER_BACKSPLASH, *strips[edge])
            for edge in EDGE_ORDER
            if edge not in configuration.polished_edges
        ]

    def _sink(self, placement: SinkPlacement) -> list[CutSheetEntity]:
        template = placement.template
        shrink = self.settings.cutout_shrink
        cut_w = max(template.width - shrink, 0.0)
        cut_h = max(template.height - shrink, 0.0)
        cx, cy = placement.x, placement.y

        entities: list[CutSheetEntity] = []
        if template.kind == CutoutKind.OVAL:
            if cut_w >= cut_h:
                major = _pt(cut_w / 2, 0.0)
                ratio = cut_h / cut_w if cut_w else 1.0
            else:
                major = _pt(0.0, cut_h / 2)
                ratio = cut_w / cut_h
            entities.append(EllipseEntity(LAYER_CUTOUT, _pt(cx, cy), major, _r(ratio)))
        else:
            entities.append(
                _rectangle(LAYER_CUTOUT, cx - cut_w / 2, cy - cut_h / 2, cut_w, cut_h)
            )

        # Holes sit behind the cutout, on its vertical centerline
        hole_y = cy + cut_h / 2 + self.settings.hole_setback
        radius = _r(self.settings.hole_diameter / 2)
        faucet = placement.faucet
        if faucet.holes == FaucetHoles.THREE and faucet.spread is not None:
            offset = faucet.spread.value / 2
            offsets = (-offset, 0.0, offset)
        else:
            offsets = (0.0,)
        for dx in offsets:
            entities.append(CircleEntity(LAYER_HOLES, _pt(cx + dx, hole_y), radius))
        return entities

    def _annotations(
        self, configuration: Configuration, width: float, height: float
    ) -> list[CutSheetEntity]:
        text_height = self.settings.text_height
        entities: list[CutSheetEntity] = [
            TextEntity(
                LAYER_TEXT,
                describe_shape(configuration),
                _pt(width / 2, height + 2.0),
                text_height,
            )
        ]
        if configuration.is_rectangle:
            edges = [
                edge.value.capitalize()
                for edge in EDGE_ORDER
                if edge in configuration.polished_edges
            ]
            entities.append(
                TextEntity(
                    LAYER_TEXT,
                    f"Polished edges: {', '.join(edges) or 'None'}",
                    _pt(0.0, height + 6.0),
                    text_height,
                )
            )
        return entities


def describe_shape(configuration: Configuration) -> str:
    """Short shape label used on the cut sheet and in summaries."""
    dims = configuration.dimensions
    if isinstance(dims, RectangleDimensions):
        return f'Rectangle {_fmt(dims.length)}" x {_fmt(dims.width)}"'
    if isinstance(dims, CircleDimensions):
        return f'Circle {_fmt(dims.diameter)}" dia.'
    if isinstance(dims, PolygonDimensions):
        return f'{dims.side_count}-gon, side {_fmt(round(dims.side_length, 3))}"'
    raise TypeError(f"Unsupported dimensions: {type(dims).__name__}")


def _rectangle(
    layer: str, x: float, y: float, width: float, height: float
) -> PolylineEntity:
    points = (
        _pt(x, y),
        _pt(x + width, y),
        _pt(x + width, y + height),
        _pt(x, y + height),
    )
    return PolylineEntity(layer, points, closed=True)

