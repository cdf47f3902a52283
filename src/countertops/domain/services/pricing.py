"""Countertop pricing: material, sink add-ons, backsplash, freight and tax.

The same engine runs for the buyer-facing quote and for the trusted
server-side re-price, so every figure is a pure function of the
Configuration and the rates.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..entities import Configuration
from ..value_objects import EDGE_ORDER, RectangleDimensions
from .geometry import SQIN_PER_SQFT, area_sqft

__all__ = [
    "DEFAULT_DISTANCE_BANDS",
    "DEFAULT_TAX_RATES",
    "PricingEngine",
    "PricingRates",
    "PricingResult",
    "ShippingEstimate",
    "is_valid_zip",
    "round_cents",
    "to_cents",
    "zip_prefix",
]

_ZIP_PATTERN = re.compile(r"^\d{5}$")
_CENT = Decimal("0.01")

# (mileage ceiling, multiplier); the first band whose ceiling covers the
# distance wins, anything beyond the last band uses the overflow multiplier
DEFAULT_DISTANCE_BANDS: tuple[tuple[float, float], ...] = (
    (250.0, 1.00),
    (600.0, 1.25),
    (1000.0, 1.50),
    (1500.0, 1.70),
)
DEFAULT_OVERFLOW_MULTIPLIER = 1.85

# ZIP prefix -> sales tax rate
DEFAULT_TAX_RATES: tuple[tuple[str, float], ...] = (
    ("63", 0.0825),
    ("62", 0.0875),
)
DEFAULT_TAX_RATE = 0.07


def is_valid_zip(zip_code: str) -> bool:
    """True for exactly five ASCII digits."""
    return bool(_ZIP_PATTERN.match(zip_code or ""))


def zip_prefix(zip_code: str) -> int:
    """Three-digit ZIP prefix used for the distance estimate; 0 when invalid."""
    if not is_valid_zip(zip_code):
        return 0
    return int(zip_code[:3])


def round_cents(value: float) -> float:
    """Round a dollar amount to cents, half away from zero."""
    return float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def to_cents(value: float) -> int:
    """Dollar amount as integer cents, rounded half up."""
    return int(
        (Decimal(repr(value)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    )


@dataclass(frozen=True)
class PricingRates:
    """Rates and tables the pricing engine works from.

    Attributes:
        material_per_sqft: Stone price per square foot, also used for backsplash.
        weight_lb_per_sqft: Shipping weight of the slab per square foot.
        freight_per_cwt: LTL freight base rate per hundredweight.
        packing_multiplier: Crating surcharge applied after the distance band.
        backsplash_height: Height of a backsplash strip in inches.
        origin_zip: Shop ZIP code freight is quoted from.
        distance_bands: (mileage ceiling, multiplier) pairs, ascending.
        overflow_multiplier: Multiplier past the last distance band.
        tax_rates: (ZIP prefix, rate) pairs checked in order.
        default_tax_rate: Rate for any other or invalid ZIP.
    """

    material_per_sqft: float = 55.0
    weight_lb_per_sqft: float = 10.9
    freight_per_cwt: float = 35.9
    packing_multiplier: float = 1.20
    backsplash_height: float = 4.0
    origin_zip: str = "63052"
    distance_bands: tuple[tuple[float, float], ...] = DEFAULT_DISTANCE_BANDS
    overflow_multiplier: float = DEFAULT_OVERFLOW_MULTIPLIER
    tax_rates: tuple[tuple[str, float], ...] = DEFAULT_TAX_RATES
    default_tax_rate: float = DEFAULT_TAX_RATE

    def __post_init__(self) -> None:
        for name in (
            "material_per_sqft",
            "weight_lb_per_sqft",
            "freight_per_cwt",
            "packing_multiplier",
            "backsplash_height",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        ceilings = [ceiling for ceiling, _ in self.distance_bands]
        if ceilings != sorted(ceilings):
            raise ValueError("distance_bands must be sorted by mileage ceiling")
        if not is_valid_zip(self.origin_zip):
            raise ValueError(f"origin_zip must be a 5-digit ZIP: {self.origin_zip!r}")


@dataclass(frozen=True)
class ShippingEstimate:
    """Freight estimate for one slab."""

    miles: float
    weight_lb: float
    cwt: int
    multiplier: float
    freight: float


@dataclass(frozen=True)
class PricingResult:
    """Derived price breakdown for a configuration. Amounts are unrounded."""

    area_sqft: float
    material: float
    sink_addons: float
    backsplash_sqft: float
    backsplash: float
    shipping: ShippingEstimate
    services: float
    tax_rate: float
    tax: float
    total: float
    line_items: tuple[tuple[str, float], ...] = field(default_factory=tuple)

    @property
    def total_cents(self) -> int:
        """Grand total in integer cents for the payment gateway."""
        return to_cents(self.total)

    def summary(self) -> dict[str, Any]:
        """Cent-rounded payload shown to the buyer and stored with orders."""
        return {
            "product": round_cents(self.material),
            "sink_addon": round_cents(self.sink_addons),
            "backsplash": round_cents(self.backsplash),
            "shipping": round_cents(self.shipping.freight),
            "services": round_cents(self.services),
            "tax_rate": self.tax_rate,
            "tax": round_cents(self.tax),
            "total": round_cents(self.total),
            "weight_lb": round(self.shipping.weight_lb, 1),
            "cwt": self.shipping.cwt,
            "mult": self.shipping.multiplier,
        }


class PricingEngine:
    """Prices configurations against a set of rates."""

    def __init__(self, rates: PricingRates | None = None) -> None:
        self.rates = rates or PricingRates()

    def backsplash_sqft(self, configuration: Configuration) -> float:
        """Backsplash area: one strip along every unpolished rectangle edge."""
        dimensions = configuration.dimensions
        if not configuration.backsplash or not isinstance(
            dimensions, RectangleDimensions
        ):
            return 0.0
        unpolished = [
            edge for edge in EDGE_ORDER if edge not in configuration.polished_edges
        ]
        sqin = sum(
            dimensions.length_of(edge) * self.rates.backsplash_height
            for edge in unpolished
        )
        return sqin / SQIN_PER_SQFT

    def sink_addons(self, configuration: Configuration) -> float:
        if not configuration.is_rectangle:
            return 0.0
        return sum(placement.template.price for placement in configuration.sinks)

    def distance_miles(self, destination_zip: str) -> float:
        """Rough road miles between the shop and a destination ZIP."""
        origin = zip_prefix(self.rates.origin_zip)
        destination = zip_prefix(destination_zip)
        return abs(origin - destination) * 20 + 100

    def distance_multiplier(self, destination_zip: str) -> float:
        miles = self.distance_miles(destination_zip)
        for ceiling, multiplier in self.rates.distance_bands:
            if miles <= ceiling:
                return multiplier
        return self.rates.overflow_multiplier

    def tax_rate_for_zip(self, zip_code: str) -> float:
        if is_valid_zip(zip_code):
            for prefix, rate in self.rates.tax_rates:
                if zip_code.startswith(prefix):
                    return rate
        return self.rates.default_tax_rate

    def shipping(self, shipped_sqft: float, destination_zip: str) -> ShippingEstimate:
        """LTL freight for a given stone area."""
        weight = shipped_sqft * self.rates.weight_lb_per_sqft
        cwt = max(1, math.ceil(weight / 100))
        multiplier = self.distance_multiplier(destination_zip)
        freight = (
            cwt * self.rates.freight_per_cwt * multiplier * self.rates.packing_multiplier
        )
        return ShippingEstimate(
            miles=self.distance_miles(destination_zip),
            weight_lb=weight,
            cwt=cwt,
            multiplier=multiplier,
            freight=freight,
        )

    def price(self, configuration: Configuration) -> PricingResult:
        """Compute the full price breakdown for a configuration."""
        area = area_sqft(configuration.dimensions)
        material = area * self.rates.material_per_sqft
        sinks = self.sink_addons(configuration)
        backsplash_area = self.backsplash_sqft(configuration)
        backsplash = backsplash_area * self.rates.material_per_sqft
        shipping = self.shipping(area + backsplash_area, configuration.destination_zip)

        services = material + sinks + backsplash + shipping.freight
        tax_rate = self.tax_rate_for_zip(configuration.destination_zip)
        tax = services * tax_rate

        line_items = [(f"Stone ({area:.2f} sq ft)", material)]
        for placement in configuration.sinks:
            line_items.append((placement.template.label, placement.template.price))
        if backsplash_area:
            line_items.append((f"Backsplash ({backsplash_area:.2f} sq ft)", backsplash))
        line_items.append(
            (f"Freight ({shipping.cwt} cwt x {shipping.multiplier:g})", shipping.freight)
        )

        return PricingResult(
            area_sqft=area,
            material=material,
            sink_addons=sinks,
            backsplash_sqft=backsplash_area,
            backsplash=backsplash,
            shipping=shipping,
            services=services,
            tax_rate=tax_rate,
            tax=tax,
            total=services + tax,
            line_items=tuple(line_items),
        )
