"""Adapter functions from configuration schemas to domain objects.

Settings become frozen domain value objects. Designs are replayed through
the editor commands, so a design file is held to exactly the same rules as
a buyer clicking through the configurator.
"""

from typing import TYPE_CHECKING

from countertops.application.commands import ConfigurationEditor
from countertops.application.config.schemas import DesignFile, ShopSettings
from countertops.domain import Configuration, PlacementRules, PricingRates, to_grid

if TYPE_CHECKING:
    from countertops.infrastructure.cut_sheet import CutSheetSettings


def settings_to_rates(settings: ShopSettings | None) -> PricingRates:
    """Convert the pricing section of shop settings to PricingRates.

    Returns default rates if settings is None.
    """
    if settings is None:
        return PricingRates()
    pricing = settings.pricing
    return PricingRates(
        material_per_sqft=pricing.material_per_sqft,
        weight_lb_per_sqft=pricing.weight_lb_per_sqft,
        freight_per_cwt=pricing.freight_per_cwt,
        packing_multiplier=pricing.packing_multiplier,
        backsplash_height=pricing.backsplash_height,
        origin_zip=pricing.origin_zip,
        distance_bands=tuple(
            (band.max_miles, band.multiplier) for band in pricing.distance_bands
        ),
        overflow_multiplier=pricing.overflow_multiplier,
        tax_rates=tuple((tax.zip_prefix, tax.rate) for tax in pricing.tax_rates),
        default_tax_rate=pricing.default_tax_rate,
    )


def settings_to_placement_rules(settings: ShopSettings | None) -> PlacementRules:
    if settings is None:
        return PlacementRules()
    placement = settings.placement
    return PlacementRules(
        min_edge_clearance=placement.min_edge_clearance,
        min_gap=placement.min_gap,
        max_sinks=placement.max_sinks,
    )


def settings_to_cut_sheet_settings(
    settings: ShopSettings | None,
) -> "CutSheetSettings":
    """Convert the cut_sheet section of shop settings to CutSheetSettings."""
    # Lazy import to avoid loading the infrastructure layer at import time
    from countertops.infrastructure.cut_sheet import CutSheetSettings

    if settings is None:
        return CutSheetSettings()
    cut_sheet = settings.cut_sheet
    return CutSheetSettings(
        hole_diameter=cut_sheet.hole_diameter,
        hole_setback=cut_sheet.hole_setback,
        cutout_shrink=cut_sheet.cutout_shrink,
        backsplash_gap=cut_sheet.backsplash_gap,
        backsplash_depth=cut_sheet.backsplash_depth,
        text_height=cut_sheet.text_height,
    )


def design_to_configuration(
    design: DesignFile,
    editor: ConfigurationEditor | None = None,
) -> tuple[Configuration, list[str]]:
    """Build a Configuration from a design file.

    Every step goes through the editor commands. Commands that are rejected
    or withheld are skipped and reported, so the returned configuration is
    always valid.

    Args:
        design: Validated design file.
        editor: Editor to apply commands with; defaults to standard rules.

    Returns:
        The configuration and a list of messages for every rejected step.
    """
    editor = editor or ConfigurationEditor()
    messages: list[str] = []
    config = editor.new_configuration()

    config = editor.apply_shape_change(config, design.shape).configuration
    dims = design.dimensions
    config = editor.apply_dimensions(
        config,
        length=dims.length,
        width=dims.width,
        diameter=dims.diameter,
        side_count=dims.side_count,
        side_length=dims.side_length,
    ).configuration

    if design.polished_edges:
        config = editor.set_polished_edges(config, design.polished_edges).configuration
    if design.backsplash:
        config = editor.set_backsplash(config, True).configuration

    result = editor.set_color(config, design.color)
    if result.rejected:
        messages.append(f"color: unknown stone color '{design.color}'")
    config = result.configuration
    config = editor.set_destination_zip(config, design.zip).configuration

    for index, sink in enumerate(design.sinks):
        path = f"sinks[{index}]"
        added = editor.add_sink(config, sink.template)
        sink_id = added.sink_id
        if added.rejected or sink_id is None:
            messages.append(f"{path}: {added.message}")
            continue
        config = added.configuration

        if sink.x is not None and sink.y is not None:
            moved = editor.move_sink_to(config, sink_id, sink.x, sink.y)
            if not moved.applied:
                messages.append(
                    f"{path}: cannot move to ({sink.x:g}, {sink.y:g}) without "
                    "crowding another sink; kept the automatic position"
                )
            else:
                placed = moved.configuration.sink(sink_id)
                # Grid rounding alone is not reported
                if placed is not None and (placed.x, placed.y) != (
                    to_grid(sink.x),
                    to_grid(sink.y),
                ):
                    messages.append(
                        f"{path}: moved to ({placed.x:g}, {placed.y:g}) to keep "
                        "edge clearance"
                    )
                config = moved.configuration

        if sink.faucet_holes == 3:
            config = editor.set_faucet(
                config, sink_id, 3, sink.faucet_spread
            ).configuration

    return config, messages
