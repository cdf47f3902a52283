"""Collision-aware sink cutout placement.

Sinks are only placed on rectangular slabs. Each cutout keeps a minimum
clearance from every slab edge and a minimum gap from every other cutout.
Footprints are treated as axis-aligned rectangles (ovals use their bounding
box), so two cutouts are clear of each other whenever they are separated,
clearance included, along either axis.

Every center the engine commits lies on the 0.01in position grid, which is
the precision the configuration codec carries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_CEILING

from ..entities import Configuration, SinkPlacement, new_sink_id
from ..value_objects import (
    SINK_TEMPLATES,
    PlacementBounds,
    RectangleDimensions,
    RejectionReason,
    SinkTemplate,
    to_grid,
)

__all__ = [
    "DragResult",
    "PlacementResult",
    "PlacementRules",
    "ResnapResult",
    "SinkPlacementEngine",
]

logger = logging.getLogger(__name__)

# Auto-placement anchor for the first sink, as fractions of L and W
FIRST_SINK_ANCHOR = (0.5, 0.35)

# Float slack in distance checks between grid positions
POSITION_TOLERANCE = 1e-6


@dataclass(frozen=True)
class PlacementRules:
    """Manufacturing constraints for sink cutouts.

    Attributes:
        min_edge_clearance: Minimum stone between a cutout and any slab edge.
        min_gap: Minimum stone between two cutouts.
        max_sinks: Maximum number of cutouts per slab.
    """

    min_edge_clearance: float = 4.0
    min_gap: float = 4.0
    max_sinks: int = 2

    def __post_init__(self) -> None:
        if self.min_edge_clearance < 0:
            raise ValueError("min_edge_clearance must be non-negative")
        if self.min_gap < 0:
            raise ValueError("min_gap must be non-negative")
        if self.max_sinks < 0:
            raise ValueError("max_sinks must be non-negative")


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of adding a sink.

    On rejection, configuration is the unchanged input and reason says why.
    """

    configuration: Configuration
    placement: SinkPlacement | None = None
    reason: RejectionReason | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class DragResult:
    """Outcome of one drag frame.

    applied is False when the move was withheld because the clamped position
    would violate the gap to another sink.
    """

    configuration: Configuration
    applied: bool


@dataclass(frozen=True)
class ResnapResult:
    """Outcome of fitting existing sinks onto resized slab dimensions."""

    configuration: Configuration
    dropped: tuple[str, ...] = field(default_factory=tuple)


REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.NOT_RECTANGLE: "Sinks can only be added to rectangular pieces.",
    RejectionReason.UNKNOWN_TEMPLATE: "Unknown sink template.",
    RejectionReason.DOES_NOT_FIT: (
        "That sink will not fit this piece with the required edge clearance."
    ),
    RejectionReason.NO_ROOM_FOR_SECOND: (
        "There is not enough room to add a second sink with required clearances."
    ),
    RejectionReason.AT_CAPACITY: "The maximum number of sinks is already placed.",
    RejectionReason.UNKNOWN_SINK: "No sink with that id is placed on this piece.",
}


class SinkPlacementEngine:
    """Fits, places, drags and validates sink cutouts on a rectangular slab."""

    def __init__(self, rules: PlacementRules | None = None) -> None:
        self.rules = rules or PlacementRules()

    # --- Geometry tests ---

    def fits(self, template: SinkTemplate, dimensions: RectangleDimensions) -> bool:
        """True if the template fits the slab with edge clearance on all sides."""
        margin = 2 * self.rules.min_edge_clearance
        return (
            template.width + margin <= dimensions.length
            and template.height + margin <= dimensions.width
        )

    def bounds(
        self, template: SinkTemplate, dimensions: RectangleDimensions
    ) -> PlacementBounds:
        """Legal center positions for the template on the slab."""
        clearance = self.rules.min_edge_clearance
        half_w = template.width / 2
        half_h = template.height / 2
        return PlacementBounds(
            x_min=clearance + half_w,
            x_max=dimensions.length - clearance - half_w,
            y_min=clearance + half_h,
            y_max=dimensions.width - clearance - half_h,
        )

    def min_separation(
        self, first: SinkTemplate, second: SinkTemplate
    ) -> tuple[float, float]:
        """Center distance needed along x and along y for two cutouts to be clear."""
        gap = self.rules.min_gap
        return (
            (first.width + second.width) / 2 + gap,
            (first.height + second.height) / 2 + gap,
        )

    def is_clear(
        self,
        template: SinkTemplate,
        x: float,
        y: float,
        other: SinkPlacement,
        tolerance: float = 0.0,
    ) -> bool:
        """True if a cutout at (x, y) keeps the minimum gap to another sink."""
        min_dx, min_dy = self.min_separation(template, other.template)
        dx = abs(x - other.x)
        dy = abs(y - other.y)
        return dx >= min_dx - tolerance or dy >= min_dy - tolerance

    def is_clear_of_all(
        self,
        template: SinkTemplate,
        x: float,
        y: float,
        others: tuple[SinkPlacement, ...] | list[SinkPlacement],
    ) -> bool:
        return all(
            self.is_clear(template, x, y, other, POSITION_TOLERANCE) for other in others
        )

    # --- Second sink ---

    def can_place_second(
        self,
        template: SinkTemplate,
        dimensions: RectangleDimensions,
        first: SinkPlacement,
    ) -> bool:
        """True if some legal grid center for the template clears the first sink.

        The farthest reachable grid point along either axis decides: if
        neither axis can reach the required separation, no point can.
        """
        grid = self.bounds(template, dimensions).on_grid()
        if grid.is_degenerate:
            return False
        min_dx, min_dy = self.min_separation(template, first.template)
        reach_x = max(abs(grid.x_min - first.x), abs(grid.x_max - first.x))
        reach_y = max(abs(grid.y_min - first.y), abs(grid.y_max - first.y))
        return (
            reach_x >= min_dx - POSITION_TOLERANCE
            or reach_y >= min_dy - POSITION_TOLERANCE
        )

    def suggest_second_position(
        self,
        template: SinkTemplate,
        dimensions: RectangleDimensions,
        first: SinkPlacement,
    ) -> tuple[float, float] | None:
        """Pick a grid position for a second sink, or None if there is no room.

        Candidates are tried in priority order: mirror through the slab
        center, horizontal mirror, vertical mirror, the four axis offsets from
        the first sink (clamped into the bounds), the bounds corners and
        finally the bounds center. Each candidate is snapped to the position
        grid before its clearance is checked.
        """
        bounds = self.bounds(template, dimensions)
        grid = bounds.on_grid()
        if grid.is_degenerate:
            return None

        length = dimensions.length
        width = dimensions.width
        min_dx, min_dy = self.min_separation(template, first.template)
        # Offsets rounded up so a snapped offset never falls short
        step_x = to_grid(min_dx, ROUND_CEILING)
        step_y = to_grid(min_dy, ROUND_CEILING)
        candidates = [
            (length - first.x, width - first.y),
            (length - first.x, first.y),
            (first.x, width - first.y),
            grid.clamp(first.x + step_x, first.y),
            grid.clamp(first.x - step_x, first.y),
            grid.clamp(first.x, first.y + step_y),
            grid.clamp(first.x, first.y - step_y),
            *grid.corners,
            grid.center,
        ]
        for x, y in candidates:
            if not bounds.contains(x, y):
                continue
            snapped = bounds.snap(x, y)
            if snapped is not None and self.is_clear(
                template, snapped[0], snapped[1], first, POSITION_TOLERANCE
            ):
                return snapped
        return None

    # --- Commands ---

    def add_sink(
        self,
        configuration: Configuration,
        template_key: str,
        sink_id: str | None = None,
    ) -> PlacementResult:
        """Place a new sink, auto-positioned, or explain why it cannot be placed."""
        dimensions = configuration.dimensions
        if not isinstance(dimensions, RectangleDimensions):
            return self._reject(configuration, RejectionReason.NOT_RECTANGLE)
        template = SINK_TEMPLATES.get(template_key)
        if template is None:
            return self._reject(configuration, RejectionReason.UNKNOWN_TEMPLATE)

        bounds = self.bounds(template, dimensions)
        if not self.fits(template, dimensions) or bounds.on_grid().is_degenerate:
            return self._reject(configuration, RejectionReason.DOES_NOT_FIT)
        if len(configuration.sinks) >= self.rules.max_sinks:
            return self._reject(configuration, RejectionReason.AT_CAPACITY)

        position: tuple[float, float] | None
        if not configuration.sinks:
            position = bounds.snap(
                dimensions.length * FIRST_SINK_ANCHOR[0],
                dimensions.width * FIRST_SINK_ANCHOR[1],
            )
        else:
            position = self._position_beside(template, dimensions, configuration.sinks)
        if position is None:
            return self._reject(configuration, RejectionReason.NO_ROOM_FOR_SECOND)

        placement = SinkPlacement(
            sink_id=sink_id or new_sink_id(),
            template_key=template.key,
            x=position[0],
            y=position[1],
        )
        logger.debug(
            f"Placed {template.key} at ({placement.x:.2f}, {placement.y:.2f})"
        )
        return PlacementResult(
            configuration=configuration.with_sinks(configuration.sinks + (placement,)),
            placement=placement,
        )

    def move_sink(
        self, configuration: Configuration, sink_id: str, x: float, y: float
    ) -> DragResult:
        """Move a sink toward (x, y), clamped into its bounds and snapped to the grid.

        If the snapped position would crowd another sink the frame is
        withheld and the configuration comes back unchanged.
        """
        placement = configuration.sink(sink_id)
        dimensions = configuration.dimensions
        if placement is None or not isinstance(dimensions, RectangleDimensions):
            return DragResult(configuration=configuration, applied=False)

        snapped = self.bounds(placement.template, dimensions).snap(x, y)
        if snapped is None:
            return DragResult(configuration=configuration, applied=False)

        new_x, new_y = snapped
        others = [s for s in configuration.sinks if s.sink_id != sink_id]
        if not self.is_clear_of_all(placement.template, new_x, new_y, others):
            return DragResult(configuration=configuration, applied=False)

        return DragResult(
            configuration=configuration.replacing_sink(placement.moved_to(new_x, new_y)),
            applied=True,
        )

    def remove_sink(
        self, configuration: Configuration, sink_id: str
    ) -> PlacementResult:
        """Remove a sink; the remaining sinks keep their ids and order."""
        if configuration.sink(sink_id) is None:
            return self._reject(configuration, RejectionReason.UNKNOWN_SINK)
        remaining = tuple(s for s in configuration.sinks if s.sink_id != sink_id)
        return PlacementResult(configuration=configuration.with_sinks(remaining))

    def resnap(self, configuration: Configuration) -> ResnapResult:
        """Fit existing sinks onto the configuration's (new) dimensions.

        Sinks are processed in order. Each is clamped into its bounds and
        snapped to the grid; a sink that no longer fits, or that would crowd
        an earlier kept sink, is dropped.
        """
        dimensions = configuration.dimensions
        if not isinstance(dimensions, RectangleDimensions) or not configuration.sinks:
            return ResnapResult(configuration=configuration)

        kept: list[SinkPlacement] = []
        dropped: list[str] = []
        for placement in configuration.sinks:
            template = placement.template
            bounds = self.bounds(template, dimensions)
            snapped = None
            if self.fits(template, dimensions):
                snapped = bounds.snap(placement.x, placement.y)
            if snapped is None or not self.is_clear_of_all(
                template, snapped[0], snapped[1], kept
            ):
                dropped.append(placement.sink_id)
                continue
            kept.append(placement.moved_to(*snapped))

        if dropped:
            logger.warning(f"Dropped sinks that no longer fit: {', '.join(dropped)}")
        return ResnapResult(
            configuration=configuration.with_sinks(tuple(kept)),
            dropped=tuple(dropped),
        )

    def validate(self, configuration: Configuration) -> list[str]:
        """Return clearance violations in the configuration (empty if valid)."""
        errors: list[str] = []
        if not configuration.sinks:
            return errors
        dimensions = configuration.dimensions
        if not isinstance(dimensions, RectangleDimensions):
            return ["Sinks are only allowed on rectangular pieces"]
        if len(configuration.sinks) > self.rules.max_sinks:
            errors.append(
                f"At most {self.rules.max_sinks} sinks are allowed, "
                f"got {len(configuration.sinks)}"
            )

        for index, placement in enumerate(configuration.sinks):
            template = placement.template
            if not self.fits(template, dimensions):
                errors.append(f"Sink {placement.sink_id} does not fit the piece")
                continue
            bounds = self.bounds(template, dimensions)
            if not bounds.contains(placement.x, placement.y, POSITION_TOLERANCE):
                errors.append(
                    f"Sink {placement.sink_id} is closer than "
                    f"{self.rules.min_edge_clearance:g}\" to an edge"
                )
            for other in configuration.sinks[index + 1 :]:
                if not self.is_clear(
                    template, placement.x, placement.y, other, POSITION_TOLERANCE
                ):
                    errors.append(
                        f"Sinks {placement.sink_id} and {other.sink_id} are closer "
                        f"than {self.rules.min_gap:g}\" apart"
                    )
        return errors

    # --- Helpers ---

    def _position_beside(
        self,
        template: SinkTemplate,
        dimensions: RectangleDimensions,
        placed: tuple[SinkPlacement, ...],
    ) -> tuple[float, float] | None:
        first = placed[0]
        if not self.can_place_second(template, dimensions, first):
            return None
        position = self.suggest_second_position(template, dimensions, first)
        if position is None:
            return None
        # Any further sinks (when rules allow more than two) must also be clear
        if not self.is_clear_of_all(template, position[0], position[1], placed[1:]):
            return None
        return position

    @staticmethod
    def _reject(
        configuration: Configuration, reason: RejectionReason
    ) -> PlacementResult:
        return PlacementResult(
            configuration=configuration,
            reason=reason,
            message=REJECTION_MESSAGES[reason],
        )
