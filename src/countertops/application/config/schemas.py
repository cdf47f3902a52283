"""Pydantic schemas for shop settings files and design files.

Settings files override the pricing rates, placement rules and cut sheet
constants. Design files describe one countertop the way a buyer would enter
it in the configurator; raw dimensions are accepted as given and clamped when
the design is applied.
"""

from __future__ import annotations

from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from countertops.domain.value_objects import DEFAULT_COLOR, Edge, Shape

# Supported schema versions for settings and design files
# Version 1.0: Initial schema
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


def _check_version(v: str) -> str:
    """Accept supported versions and newer minor versions of a supported major."""
    if v in SUPPORTED_VERSIONS:
        return v
    major_version = int(v.split(".")[0])
    supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
    if major_version in supported_majors:
        return v
    raise ValueError(
        f"Unsupported schema version '{v}'. "
        f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
    )


# =============================================================================
# Shop settings
# =============================================================================


class DistanceBandConfig(BaseModel):
    """Freight multiplier applied up to a mileage ceiling."""

    model_config = ConfigDict(extra="forbid")

    max_miles: float = Field(..., gt=0)
    multiplier: float = Field(..., gt=0)


class TaxRateConfig(BaseModel):
    """Sales tax rate for destination ZIPs starting with a prefix."""

    model_config = ConfigDict(extra="forbid")

    zip_prefix: str = Field(..., pattern=r"^\d{1,5}$")
    rate: float = Field(..., ge=0, le=1)


class PricingConfig(BaseModel):
    """Pricing rates and tables.

    Attributes:
        material_per_sqft: Stone price per square foot.
        weight_lb_per_sqft: Slab shipping weight per square foot.
        freight_per_cwt: LTL base rate per hundredweight.
        packing_multiplier: Crating surcharge applied after the distance band.
        backsplash_height: Backsplash strip height in inches.
        origin_zip: Shop ZIP code.
        distance_bands: Mileage bands, ascending by max_miles.
        overflow_multiplier: Multiplier past the last band.
        tax_rates: ZIP prefix tax rates, checked in order.
        default_tax_rate: Rate for any other or invalid ZIP.
    """

    model_config = ConfigDict(extra="forbid")

    material_per_sqft: float = Field(default=55.0, ge=0)
    weight_lb_per_sqft: float = Field(default=10.9, ge=0)
    freight_per_cwt: float = Field(default=35.9, ge=0)
    packing_multiplier: float = Field(default=1.20, ge=1)
    backsplash_height: float = Field(default=4.0, gt=0, le=12)
    origin_zip: str = Field(default="63052", pattern=r"^\d{5}$")
    distance_bands: list[DistanceBandConfig] = Field(
        default_factory=lambda: [
            DistanceBandConfig(max_miles=250, multiplier=1.00),
            DistanceBandConfig(max_miles=600, multiplier=1.25),
            DistanceBandConfig(max_miles=1000, multiplier=1.50),
            DistanceBandConfig(max_miles=1500, multiplier=1.70),
        ]
    )
    overflow_multiplier: float = Field(default=1.85, gt=0)
    tax_rates: list[TaxRateConfig] = Field(
        default_factory=lambda: [
            TaxRateConfig(zip_prefix="63", rate=0.0825),
            TaxRateConfig(zip_prefix="62", rate=0.0875),
        ]
    )
    default_tax_rate: float = Field(default=0.07, ge=0, le=1)

    @field_validator("distance_bands")
    @classmethod
    def validate_bands_ascending(
        cls, v: list[DistanceBandConfig]
    ) -> list[DistanceBandConfig]:
        ceilings = [band.max_miles for band in v]
        if ceilings != sorted(ceilings):
            raise ValueError("distance_bands must be sorted by max_miles")
        return v


class PlacementConfig(BaseModel):
    """Sink clearance rules."""

    model_config = ConfigDict(extra="forbid")

    min_edge_clearance: float = Field(default=4.0, ge=0, le=12)
    min_gap: float = Field(default=4.0, ge=0, le=24)
    max_sinks: int = Field(default=2, ge=0, le=2)


class CutSheetConfig(BaseModel):
    """Cut sheet drawing constants, in inches."""

    model_config = ConfigDict(extra="forbid")

    hole_diameter: float = Field(default=1.25, gt=0, le=4)
    hole_setback: float = Field(default=2.0, ge=0, le=12)
    cutout_shrink: float = Field(default=0.0, ge=0, le=2)
    backsplash_gap: float = Field(default=1.0, ge=0, le=12)
    backsplash_depth: float = Field(default=4.0, gt=0, le=12)
    text_height: float = Field(default=0.35, gt=0, le=4)


class ShopSettings(BaseModel):
    """Root model for a shop settings file.

    Example:
        >>> settings = ShopSettings(
        ...     schema_version="1.0",
        ...     pricing=PricingConfig(material_per_sqft=60.0),
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    placement: PlacementConfig = Field(default_factory=PlacementConfig)
    cut_sheet: CutSheetConfig = Field(default_factory=CutSheetConfig)
    business_email: str | None = Field(
        default=None,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Shop address copied on every cut sheet email",
    )

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        return _check_version(v)


# =============================================================================
# Design files
# =============================================================================


class DimensionsConfig(BaseModel):
    """Raw slab dimensions; only the values for the design's shape are used."""

    model_config = ConfigDict(extra="forbid")

    length: float | None = None
    width: float | None = None
    diameter: float | None = None
    side_count: float | None = None
    side_length: float | None = None


class SinkConfig(BaseModel):
    """A sink in a design file.

    Without x and y the sink is auto-placed; with them it is moved to that
    center after placement.
    """

    model_config = ConfigDict(extra="forbid")

    template: str = Field(..., min_length=1)
    x: float | None = Field(default=None, allow_inf_nan=False)
    y: float | None = Field(default=None, allow_inf_nan=False)
    faucet_holes: Literal[1, 3] = 1
    faucet_spread: Literal[4, 8] | None = None

    @model_validator(mode="after")
    def validate_position_and_faucet(self) -> "SinkConfig":
        if (self.x is None) != (self.y is None):
            raise ValueError("x and y must be given together")
        if self.faucet_holes == 1 and self.faucet_spread is not None:
            raise ValueError("faucet_spread only applies to 3-hole faucets")
        return self


class DesignFile(BaseModel):
    """Root model for a countertop design file.

    Example:
        >>> design = DesignFile(
        ...     shape="rectangle",
        ...     dimensions=DimensionsConfig(length=48, width=24),
        ...     sinks=[SinkConfig(template="bath-oval")],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    shape: Shape = Shape.RECTANGLE
    dimensions: DimensionsConfig = Field(default_factory=DimensionsConfig)
    polished_edges: list[Edge] = Field(default_factory=list)
    backsplash: bool = False
    sinks: list[SinkConfig] = Field(default_factory=list)
    color: str = DEFAULT_COLOR
    zip: str = ""

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        return _check_version(v)

    @model_validator(mode="after")
    def validate_rectangle_only_options(self) -> "DesignFile":
        if self.shape != Shape.RECTANGLE and (
            self.polished_edges or self.backsplash or self.sinks
        ):
            raise ValueError(
                "polished_edges, backsplash and sinks apply to rectangle designs only"
            )
        return self
