"""Console formatters for countertop designs and quotes."""

from __future__ import annotations

from countertops.domain import (
    EDGE_ORDER,
    STONE_COLORS,
    Configuration,
    FaucetHoles,
    PricingResult,
)
from countertops.infrastructure.cut_sheet import describe_shape


class DesignSummaryFormatter:
    """Formats a configuration as a short plain-text summary."""

    def format(self, configuration: Configuration) -> str:
        color = STONE_COLORS.get(configuration.color_key)
        lines = [
            "DESIGN",
            "=" * 50,
            f"Shape:      {describe_shape(configuration)}",
            f"Stone:      DEKTON {color.name if color else configuration.color_key}",
            f"Ship to:    {configuration.destination_zip or '(not set)'}",
        ]

        if configuration.is_rectangle:
            edges = [
                edge.value.capitalize()
                for edge in EDGE_ORDER
                if edge in configuration.polished_edges
            ]
            lines.append(f"Polished:   {', '.join(edges) or 'None'}")
            lines.append(f"Backsplash: {'Yes' if configuration.backsplash else 'No'}")

            if not configuration.sinks:
                lines.append("Sinks:      None")
            for index, sink in enumerate(configuration.sinks, start=1):
                if sink.faucet.holes == FaucetHoles.THREE and sink.faucet.spread:
                    faucet = f'3-hole, {sink.faucet.spread.value}" spread'
                else:
                    faucet = "1-hole"
                lines.append(
                    f"Sink {index}:     {sink.template.label} at "
                    f'({sink.x:.2f}", {sink.y:.2f}") [{faucet}]'
                )

        return "\n".join(lines)


class QuoteFormatter:
    """Formats a price breakdown as a table."""

    WIDTH = 50

    def format(self, pricing: PricingResult) -> str:
        summary = pricing.summary()
        lines = [
            "QUOTE",
            "=" * self.WIDTH,
        ]
        for label, amount in pricing.line_items:
            lines.append(self._row(label, amount))
        lines.append("-" * self.WIDTH)
        lines.append(self._row("Subtotal", summary["services"]))
        lines.append(self._row(f"Tax ({pricing.tax_rate:.2%})", summary["tax"]))
        lines.append("=" * self.WIDTH)
        lines.append(self._row("TOTAL", summary["total"]))
        lines.append("")
        lines.append(
            f"Shipping weight {summary['weight_lb']} lb, {summary['cwt']} cwt, "
            f"~{pricing.shipping.miles:.0f} mi (x{summary['mult']:g})"
        )
        return "\n".join(lines)

    def _row(self, label: str, amount: float) -> str:
        return f"{label:<36} ${amount:>11,.2f}"
