"""Editor commands for building a countertop configuration.

Every command takes the current Configuration and returns a CommandResult
holding the next one. Commands never mutate their input; a rejected command
returns the input unchanged together with the reason.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from countertops.domain import (
    DEFAULT_DIMENSIONS,
    STONE_COLORS,
    CircleDimensions,
    Configuration,
    Edge,
    FaucetHoles,
    FaucetOption,
    FaucetSpread,
    PolygonDimensions,
    RectangleDimensions,
    RejectionReason,
    Shape,
    SinkPlacementEngine,
)
from countertops.domain.services import circle, polygon, rectangle

from .dtos import CommandResult

logger = logging.getLogger(__name__)

NOT_RECTANGLE_MESSAGE = "Edges, backsplash and sinks apply to rectangular pieces only."


class ConfigurationEditor:
    """Command handlers behind the configurator UI."""

    def __init__(self, placement_engine: SinkPlacementEngine | None = None) -> None:
        self.placement_engine = placement_engine or SinkPlacementEngine()

    def new_configuration(self) -> Configuration:
        """Default design: 36 x 25.5in rectangle, no sinks, Bergen stone."""
        return Configuration()

    # --- Shape and size ---

    def apply_shape_change(
        self, configuration: Configuration, shape: Shape | str
    ) -> CommandResult:
        """Switch the slab outline.

        Changing to a different shape installs that shape's default dimensions
        and clears sinks, polished edges and backsplash.
        """
        shape = Shape(shape)
        if shape == configuration.shape:
            return CommandResult(configuration=configuration, applied=False)
        updated = replace(
            configuration,
            shape=shape,
            dimensions=DEFAULT_DIMENSIONS[shape],
            polished_edges=frozenset(),
            backsplash=False,
            sinks=(),
        )
        return CommandResult(
            configuration=updated,
            dropped_sinks=tuple(s.sink_id for s in configuration.sinks),
        )

    def apply_dimensions(
        self,
        configuration: Configuration,
        length: float | None = None,
        width: float | None = None,
        diameter: float | None = None,
        side_count: float | None = None,
        side_length: float | None = None,
    ) -> CommandResult:
        """Set dimensions for the current shape, clamping out-of-range values.

        Values that do not belong to the current shape are ignored and missing
        values keep their current setting. Placed sinks are re-snapped to the
        new size; any that no longer fit are dropped.
        """
        dims = configuration.dimensions
        if isinstance(dims, RectangleDimensions):
            new_dims = rectangle(
                dims.length if length is None else length,
                dims.width if width is None else width,
            )
        elif isinstance(dims, CircleDimensions):
            new_dims = circle(dims.diameter if diameter is None else diameter)
        elif isinstance(dims, PolygonDimensions):
            new_dims = polygon(
                dims.side_count if side_count is None else side_count,
                dims.side_length if side_length is None else side_length,
            )
        else:
            raise TypeError(f"Unsupported dimensions: {type(dims).__name__}")

        resnapped = self.placement_engine.resnap(
            replace(configuration, dimensions=new_dims)
        )
        message = ""
        if resnapped.dropped:
            message = (
                f"Removed {len(resnapped.dropped)} sink(s) that no longer fit "
                "the new size."
            )
        return CommandResult(
            configuration=resnapped.configuration,
            message=message,
            dropped_sinks=resnapped.dropped,
        )

    # --- Edges and backsplash ---

    def toggle_edge(
        self, configuration: Configuration, edge: Edge | str
    ) -> CommandResult:
        """Flip the polished state of one rectangle edge."""
        if not configuration.is_rectangle:
            return self._reject(configuration, RejectionReason.NOT_RECTANGLE)
        edge = Edge(edge)
        edges = set(configuration.polished_edges)
        if edge in edges:
            edges.discard(edge)
        else:
            edges.add(edge)
        return CommandResult(
            configuration=replace(configuration, polished_edges=frozenset(edges))
        )

    def set_polished_edges(
        self, configuration: Configuration, edges: list[Edge | str] | set[Edge]
    ) -> CommandResult:
        """Replace the whole set of polished edges."""
        if not configuration.is_rectangle:
            if not edges:
                return CommandResult(configuration=configuration, applied=False)
            return self._reject(configuration, RejectionReason.NOT_RECTANGLE)
        return CommandResult(
            configuration=replace(
                configuration, polished_edges=frozenset(Edge(e) for e in edges)
            )
        )

    def set_backsplash(
        self, configuration: Configuration, enabled: bool
    ) -> CommandResult:
        if not configuration.is_rectangle:
            if not enabled:
                return CommandResult(configuration=configuration, applied=False)
            return self._reject(configuration, RejectionReason.NOT_RECTANGLE)
        return CommandResult(
            configuration=replace(configuration, backsplash=bool(enabled))
        )

    # --- Sinks ---

    def add_sink(
        self, configuration: Configuration, template_key: str
    ) -> CommandResult:
        """Add a sink at an automatically chosen position."""
        result = self.placement_engine.add_sink(configuration, template_key)
        if not result.ok:
            logger.info(f"Sink {template_key} rejected: {result.reason.value}")
            return CommandResult(
                configuration=configuration,
                applied=False,
                reason=result.reason,
                message=result.message,
            )
        return CommandResult(
            configuration=result.configuration,
            sink_id=result.placement.sink_id if result.placement else None,
        )

    def move_sink_to(
        self, configuration: Configuration, sink_id: str, x: float, y: float
    ) -> CommandResult:
        """Drag a sink; the move is withheld if it would crowd another sink."""
        if configuration.sink(sink_id) is None:
            return self._reject(configuration, RejectionReason.UNKNOWN_SINK)
        drag = self.placement_engine.move_sink(configuration, sink_id, x, y)
        return CommandResult(configuration=drag.configuration, applied=drag.applied)

    def remove_sink(self, configuration: Configuration, sink_id: str) -> CommandResult:
        result = self.placement_engine.remove_sink(configuration, sink_id)
        if not result.ok:
            return self._reject(configuration, RejectionReason.UNKNOWN_SINK)
        return CommandResult(configuration=result.configuration)

    def set_faucet(
        self,
        configuration: Configuration,
        sink_id: str,
        holes: FaucetHoles | int,
        spread: FaucetSpread | int | None = None,
    ) -> CommandResult:
        """Choose faucet drilling for a sink.

        A 3-hole faucet without a spread gets the 4in spread; a single hole
        ignores any spread given.
        """
        placement = configuration.sink(sink_id)
        if placement is None:
            return self._reject(configuration, RejectionReason.UNKNOWN_SINK)
        holes = FaucetHoles(holes)
        if holes == FaucetHoles.ONE:
            faucet = FaucetOption.single()
        else:
            faucet = FaucetOption.three_hole(
                FaucetSpread(spread) if spread is not None else FaucetSpread.FOUR
            )
        return CommandResult(
            configuration=configuration.replacing_sink(replace(placement, faucet=faucet))
        )

    # --- Selectors ---

    def set_color(self, configuration: Configuration, color_key: str) -> CommandResult:
        if color_key not in STONE_COLORS:
            return self._reject(configuration, RejectionReason.UNKNOWN_COLOR)
        return CommandResult(configuration=replace(configuration, color_key=color_key))

    def set_destination_zip(
        self, configuration: Configuration, zip_code: str
    ) -> CommandResult:
        """Store the shipping ZIP as typed; pricing falls back for invalid input."""
        return CommandResult(
            configuration=replace(configuration, destination_zip=(zip_code or "").strip())
        )

    @staticmethod
    def _reject(
        configuration: Configuration, reason: RejectionReason
    ) -> CommandResult:
        messages = {
            RejectionReason.NOT_RECTANGLE: NOT_RECTANGLE_MESSAGE,
            RejectionReason.UNKNOWN_SINK: "No sink with that id is placed on this piece.",
            RejectionReason.UNKNOWN_COLOR: "Unknown stone color.",
        }
        return CommandResult(
            configuration=configuration,
            applied=False,
            reason=reason,
            message=messages.get(reason, reason.value),
        )
