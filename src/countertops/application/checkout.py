"""Checkout and fulfilment services.

The buyer-facing quote is never trusted: checkout re-prices the configuration
on the server, and order completion rebuilds the configuration from the
payment metadata and re-validates it before producing the cut sheet. Quote,
checkout and completion all price dimensions clamped into their legal
ranges, so the amount charged is the amount fulfilled.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from countertops.contracts.protocols import (
    CutSheetEmail,
    EmailSender,
    PaymentGateway,
    PaymentRequest,
)
from countertops.domain import (
    CircleDimensions,
    Configuration,
    PolygonDimensions,
    PricingEngine,
    PricingResult,
    RectangleDimensions,
    SinkPlacementEngine,
)
from countertops.domain.services import clamp_dimensions, is_valid_zip, round_cents
from countertops.infrastructure.codec import ConfigCodec
from countertops.infrastructure.exporters.dxf import DxfExporter, encode_attachment
from countertops.infrastructure.formatters import DesignSummaryFormatter, QuoteFormatter

from .dtos import CheckoutOutput, FulfilledOrder

logger = logging.getLogger(__name__)

EMAIL_FIELD = "email"
CUT_SHEET_SUBJECT = "Your DXF Cut Sheet"

# Client and server totals may differ by rounding only
TOTAL_TOLERANCE = 0.005


class CheckoutError(Exception):
    """Raised when a configuration cannot be sent to checkout."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.message = message
        self.errors = errors or []
        super().__init__(message)


def normalize(configuration: Configuration) -> Configuration:
    """Clamp the dimensions into their legal ranges, as the editor does."""
    dimensions = clamp_dimensions(configuration.dimensions)
    if dimensions == configuration.dimensions:
        return configuration
    logger.warning(
        f"Clamped out-of-range dimensions {configuration.dimensions} to {dimensions}"
    )
    return replace(configuration, dimensions=dimensions)


def checkout_description(configuration: Configuration) -> str:
    """Line-item description shown on the payment page.

    Example: 'RECTANGLE countertop - 36" x 25.5" | DEKTON bergen | Ship to: 63052'
    """
    dims = configuration.dimensions
    if isinstance(dims, RectangleDimensions):
        size = f'{dims.length:g}" x {dims.width:g}"'
    elif isinstance(dims, CircleDimensions):
        size = f'{dims.diameter:g}" dia.'
    elif isinstance(dims, PolygonDimensions):
        size = f'{dims.side_count} sides x {round(dims.side_length, 3):g}"'
    else:
        raise TypeError(f"Unsupported dimensions: {type(dims).__name__}")
    return (
        f"{configuration.shape.value.upper()} countertop - {size} | "
        f"DEKTON {configuration.color_key} | Ship to: {configuration.destination_zip}"
    )


class CheckoutService:
    """Creates payment sessions and fulfils paid orders."""

    def __init__(
        self,
        gateway: PaymentGateway,
        pricing_engine: PricingEngine | None = None,
        placement_engine: SinkPlacementEngine | None = None,
        codec: ConfigCodec | None = None,
        exporter: DxfExporter | None = None,
    ) -> None:
        self.gateway = gateway
        self.pricing_engine = pricing_engine or PricingEngine()
        self.placement_engine = placement_engine or SinkPlacementEngine()
        self.codec = codec or ConfigCodec()
        self.exporter = exporter or DxfExporter()

    def quote(self, configuration: Configuration) -> PricingResult:
        return self.pricing_engine.price(normalize(configuration))

    def create_checkout(
        self,
        configuration: Configuration,
        customer_email: str | None = None,
        client_total: float | None = None,
    ) -> CheckoutOutput:
        """Price the configuration server-side and open a payment session.

        Args:
            configuration: Design the buyer is paying for.
            customer_email: Buyer email to prefill and carry to fulfilment.
            client_total: Total the buyer saw; a mismatch is logged, and the
                server total is charged regardless.

        Raises:
            CheckoutError: If the destination ZIP is invalid or the sink
                placement breaks the clearance rules.
        """
        configuration = normalize(configuration)
        if not is_valid_zip(configuration.destination_zip):
            raise CheckoutError("A valid 5-digit destination ZIP code is required")
        errors = self.placement_engine.validate(configuration)
        if errors:
            raise CheckoutError("Sink placement is not valid", errors)

        pricing = self.quote(configuration)
        server_total = round_cents(pricing.total)
        if client_total is not None and abs(client_total - server_total) > TOTAL_TOLERANCE:
            logger.warning(
                f"Client total {client_total:.2f} differs from server total "
                f"{server_total:.2f}; charging server total"
            )

        metadata = self.codec.to_fields(configuration)
        if customer_email:
            metadata[EMAIL_FIELD] = customer_email
        request = PaymentRequest(
            amount_cents=pricing.total_cents,
            description=checkout_description(configuration),
            metadata=metadata,
            customer_email=customer_email or None,
        )
        session = self.gateway.create_session(request)
        logger.info(
            f"Created checkout session {session.session_id} "
            f"for {request.amount_cents} cents"
        )
        return CheckoutOutput(session=session, request=request, pricing=pricing)

    def complete_order(self, metadata: Mapping[str, Any]) -> FulfilledOrder | None:
        """Rebuild a paid order from payment metadata.

        Returns None when the metadata does not decode to a placement-valid
        configuration; nothing is priced or exported in that case.
        """
        decoded = self.codec.from_fields(metadata)
        if decoded is None:
            logger.warning("Completed payment carried no usable configuration")
            return None

        configuration = normalize(decoded)
        errors = self.placement_engine.validate(configuration)
        if errors:
            logger.warning(f"Rejected order with invalid placement: {'; '.join(errors)}")
            return None

        pricing = self.quote(configuration)
        dxf = self.exporter.export_string(configuration)
        email = metadata.get(EMAIL_FIELD)
        logger.info(f"Fulfilled order for {pricing.total_cents} cents")
        return FulfilledOrder(
            configuration=configuration,
            pricing=pricing,
            dxf=dxf,
            customer_email=str(email) if email else None,
        )


class CutSheetMailer:
    """Emails a configuration's DXF cut sheet with a text summary."""

    def __init__(
        self,
        sender: EmailSender,
        business_email: str | None = None,
        pricing_engine: PricingEngine | None = None,
        exporter: DxfExporter | None = None,
    ) -> None:
        self.sender = sender
        self.business_email = business_email
        self.pricing_engine = pricing_engine or PricingEngine()
        self.exporter = exporter or DxfExporter()

    def compose(self, configuration: Configuration, recipient: str) -> CutSheetEmail:
        if not recipient or "@" not in recipient:
            raise ValueError(f"Invalid recipient email address: {recipient!r}")
        text = "\n\n".join(
            [
                DesignSummaryFormatter().format(configuration),
                QuoteFormatter().format(self.pricing_engine.price(configuration)),
            ]
        )
        dxf = self.exporter.export_string(configuration)
        return CutSheetEmail(
            recipient=recipient,
            subject=CUT_SHEET_SUBJECT,
            text=text,
            attachment_base64=encode_attachment(dxf),
            attachment_name=f"{configuration.shape.value}-cut-sheet.dxf",
            bcc=self.business_email,
        )

    def send_cut_sheet(
        self, configuration: Configuration, recipient: str
    ) -> CutSheetEmail:
        """Compose and send the cut sheet email; delivery errors propagate."""
        message = self.compose(configuration, recipient)
        self.sender.send(message)
        logger.info(f"Sent cut sheet to {recipient}")
        return message
