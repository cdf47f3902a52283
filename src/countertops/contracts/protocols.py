"""Protocols and messages for the payment gateway and email delivery.

Both collaborators live outside this package. The checkout service builds the
messages defined here and hands them to whatever implementation it was given.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

__all__ = [
    "CutSheetEmail",
    "EmailSender",
    "PaymentGateway",
    "PaymentRequest",
    "PaymentSession",
]


@dataclass(frozen=True)
class PaymentRequest:
    """A single-item payment the gateway should collect.

    Attributes:
        amount_cents: Authoritative total in integer cents.
        description: Line-item description shown to the buyer.
        metadata: Transport fields carried through to the completion event.
        currency: ISO currency code.
        customer_email: Buyer email to prefill, if known.
    """

    amount_cents: int
    description: str
    metadata: dict[str, str] = field(default_factory=dict)
    currency: str = "usd"
    customer_email: str | None = None

    def __post_init__(self) -> None:
        if self.amount_cents <= 0:
            raise ValueError("amount_cents must be positive")


@dataclass(frozen=True)
class PaymentSession:
    """Handle returned by the gateway for a created payment."""

    session_id: str
    url: str


@dataclass(frozen=True)
class CutSheetEmail:
    """Email carrying a DXF cut sheet as a base64 attachment."""

    recipient: str
    subject: str
    text: str
    attachment_base64: str
    attachment_name: str = "cut-sheet.dxf"
    bcc: str | None = None


@runtime_checkable
class PaymentGateway(Protocol):
    """Protocol for payment providers that host a checkout session."""

    def create_session(self, request: PaymentRequest) -> PaymentSession:
        """Create a hosted checkout session for the request.

        Args:
            request: Amount, description and metadata to collect.

        Returns:
            The created session, including the URL to redirect the buyer to.
        """
        ...


@runtime_checkable
class EmailSender(Protocol):
    """Protocol for transactional email delivery."""

    def send(self, message: CutSheetEmail) -> None:
        """Deliver a message. Delivery failures propagate to the caller."""
        ...
