"""Tests for CheckoutService and CutSheetMailer."""

from __future__ import annotations

import base64
import logging
from dataclasses import replace

import pytest

from countertops.application import CheckoutError, CheckoutService, CutSheetMailer
from countertops.application.checkout import checkout_description
from countertops.contracts import EmailSender, PaymentGateway
from countertops.domain import (
    CircleDimensions,
    Configuration,
    RectangleDimensions,
    Shape,
    SinkPlacement,
)
from countertops.infrastructure import ConfigCodec, DxfExporter


@pytest.fixture
def checkout(fake_gateway) -> CheckoutService:
    return CheckoutService(fake_gateway)


class TestCheckoutDescription:
    """Tests for the payment line-item description."""

    def test_rectangle(self, polished_vanity) -> None:
        assert checkout_description(polished_vanity) == (
            'RECTANGLE countertop - 36" x 25.5" | DEKTON bergen | Ship to: 63052'
        )

    def test_circle(self) -> None:
        config = Configuration(
            shape=Shape.CIRCLE,
            dimensions=CircleDimensions(30),
            color_key="kreta",
            destination_zip="98101",
        )
        assert checkout_description(config) == (
            'CIRCLE countertop - 30" dia. | DEKTON kreta | Ship to: 98101'
        )


class TestCreateCheckout:
    """Tests for opening a payment session."""

    def test_fakes_satisfy_protocols(self, fake_gateway, fake_mailer) -> None:
        assert isinstance(fake_gateway, PaymentGateway)
        assert isinstance(fake_mailer, EmailSender)

    def test_charges_server_total(self, checkout, fake_gateway, polished_vanity) -> None:
        output = checkout.create_checkout(polished_vanity)

        assert output.request.amount_cents == 42619
        assert output.request.currency == "usd"
        assert output.session.session_id == "cs_test_1"
        assert fake_gateway.requests == [output.request]

    def test_metadata_carries_configuration(self, checkout, double_vanity) -> None:
        output = checkout.create_checkout(double_vanity, customer_email="a@b.com")

        metadata = output.request.metadata
        assert metadata["email"] == "a@b.com"
        assert output.request.customer_email == "a@b.com"
        assert ConfigCodec().from_fields(metadata) == double_vanity

    def test_invalid_zip_is_refused(self, checkout, fake_gateway, default_config) -> None:
        with pytest.raises(CheckoutError, match="ZIP"):
            checkout.create_checkout(default_config)
        assert fake_gateway.requests == []

    def test_invalid_placement_is_refused(self, checkout) -> None:
        config = Configuration(
            dimensions=RectangleDimensions(72, 22),
            sinks=(
                SinkPlacement("a", "bath-oval", x=36, y=11),
                SinkPlacement("b", "bath-rect", x=40, y=11),
            ),
            destination_zip="63052",
        )
        with pytest.raises(CheckoutError) as exc_info:
            checkout.create_checkout(config)
        assert exc_info.value.errors == ['Sinks a and b are closer than 4" apart']

    def test_client_total_mismatch_is_logged(
        self, checkout, polished_vanity, caplog
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="countertops.application.checkout"):
            output = checkout.create_checkout(polished_vanity, client_total=400.00)
        assert "differs from server total" in caplog.text
        assert output.request.amount_cents == 42619

    def test_matching_client_total_is_quiet(
        self, checkout, polished_vanity, caplog
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="countertops.application.checkout"):
            checkout.create_checkout(polished_vanity, client_total=426.19)
        assert "differs" not in caplog.text


class TestCompleteOrder:
    """Tests for fulfilling an order from payment metadata."""

    def test_round_trip_through_metadata(
        self, checkout, fake_gateway, double_vanity
    ) -> None:
        checkout.create_checkout(double_vanity, customer_email="buyer@example.com")
        metadata = fake_gateway.requests[0].metadata

        order = checkout.complete_order(metadata)

        assert order is not None
        assert order.configuration == double_vanity
        assert order.pricing == checkout.quote(double_vanity)
        assert order.dxf == DxfExporter().export_string(double_vanity)
        assert order.customer_email == "buyer@example.com"

    def test_garbage_metadata_yields_nothing(self, checkout) -> None:
        assert checkout.complete_order({"cfg": "not-a-token"}) is None
        assert checkout.complete_order({}) is None

    def test_invalid_placement_yields_nothing(self, checkout) -> None:
        config = Configuration(
            dimensions=RectangleDimensions(72, 22),
            sinks=(
                SinkPlacement("a", "bath-oval", x=36, y=11),
                SinkPlacement("b", "bath-rect", x=40, y=11),
            ),
        )
        assert checkout.complete_order(ConfigCodec().to_fields(config)) is None

    def test_dimensions_are_clamped_again(self, checkout, default_config) -> None:
        oversized = replace(default_config, dimensions=RectangleDimensions(100, 30))
        order = checkout.complete_order(ConfigCodec().to_fields(oversized))
        assert order is not None
        assert order.configuration.dimensions == RectangleDimensions(72.0, 30.0)

    def test_charged_amount_matches_fulfilled_amount(
        self, checkout, fake_gateway, caplog
    ) -> None:
        oversized = Configuration(
            dimensions=RectangleDimensions(100, 30), destination_zip="63052"
        )

        with caplog.at_level(logging.WARNING, logger="countertops.application.checkout"):
            output = checkout.create_checkout(oversized)
        order = checkout.complete_order(fake_gateway.requests[0].metadata)

        assert "Clamped out-of-range dimensions" in caplog.text
        assert order is not None
        assert output.request.amount_cents == order.pricing.total_cents
        assert output.pricing == checkout.quote(oversized)
        assert output.request.description.startswith(
            'RECTANGLE countertop - 72" x 30"'
        )

    def test_dragged_sink_on_off_grid_slab_is_fulfilled(
        self, checkout, fake_gateway, editor
    ) -> None:
        config = editor.apply_dimensions(
            editor.new_configuration(), length=36.337
        ).configuration
        added = editor.add_sink(config, "bath-oval")
        config = editor.move_sink_to(
            added.configuration, added.sink_id, 100, 11
        ).configuration
        config = editor.set_destination_zip(config, "63052").configuration

        output = checkout.create_checkout(config)
        order = checkout.complete_order(fake_gateway.requests[0].metadata)

        assert order is not None
        assert order.configuration == config
        assert order.pricing.total_cents == output.request.amount_cents


class TestCutSheetMailer:
    """Tests for the cut sheet email."""

    def test_sends_summary_and_attachment(self, fake_mailer, double_vanity) -> None:
        mailer = CutSheetMailer(fake_mailer, business_email="shop@example.com")

        message = mailer.send_cut_sheet(double_vanity, "buyer@example.com")

        assert fake_mailer.sent == [message]
        assert message.subject == "Your DXF Cut Sheet"
        assert message.bcc == "shop@example.com"
        assert message.attachment_name == "rectangle-cut-sheet.dxf"
        assert "DESIGN" in message.text
        assert "TOTAL" in message.text
        dxf = base64.b64decode(message.attachment_base64).decode("utf-8")
        assert dxf == DxfExporter().export_string(double_vanity)

    def test_invalid_recipient(self, fake_mailer, default_config) -> None:
        mailer = CutSheetMailer(fake_mailer)
        with pytest.raises(ValueError, match="recipient"):
            mailer.send_cut_sheet(default_config, "not-an-email")
        assert fake_mailer.sent == []

    def test_delivery_errors_propagate(self, default_config) -> None:
        class BrokenSender:
            def send(self, message) -> None:
                raise ConnectionError("mail server down")

        with pytest.raises(ConnectionError):
            CutSheetMailer(BrokenSender()).send_cut_sheet(
                default_config, "buyer@example.com"
            )
