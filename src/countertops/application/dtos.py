"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from countertops.contracts.protocols import PaymentRequest, PaymentSession
from countertops.domain import Configuration, PricingResult, RejectionReason


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one editor command.

    Attributes:
        configuration: The new configuration, or the unchanged input when the
            command was rejected or withheld.
        applied: False when nothing changed because of a rejection or a
            withheld drag.
        reason: Why the command was rejected, if it was.
        message: Human-readable explanation for the buyer.
        sink_id: Id of the sink created by add_sink.
        dropped_sinks: Ids of sinks removed because they no longer fit.
    """

    configuration: Configuration
    applied: bool = True
    reason: RejectionReason | None = None
    message: str = ""
    sink_id: str | None = None
    dropped_sinks: tuple[str, ...] = field(default_factory=tuple)

    @property
    def rejected(self) -> bool:
        return self.reason is not None


@dataclass(frozen=True)
class CheckoutOutput:
    """Result of creating a payment session for a configuration."""

    session: PaymentSession
    request: PaymentRequest
    pricing: PricingResult


@dataclass(frozen=True)
class FulfilledOrder:
    """A paid order reconstructed from gateway metadata.

    Attributes:
        configuration: Trusted reconstruction of the buyer's design.
        pricing: Server-side price for the reconstruction.
        dxf: Cut sheet document text.
        customer_email: Buyer email carried in the metadata, if any.
    """

    configuration: Configuration
    pricing: PricingResult
    dxf: str
    customer_email: str | None = None
