"""Integration test for a full order: edit, check out, fulfil and email."""

from __future__ import annotations

import base64
import io

import ezdxf
import pytest

from countertops.application import CheckoutService, ConfigurationEditor, CutSheetMailer
from countertops.domain import Edge, RejectionReason, Shape
from countertops.infrastructure import ConfigCodec

pytestmark = pytest.mark.integration


class TestOrderFlow:
    """A buyer designs a double vanity, pays, and the shop gets the cut sheet."""

    def test_design_to_delivered_cut_sheet(self, fake_gateway, fake_mailer) -> None:
        editor = ConfigurationEditor()
        config = editor.new_configuration()
        config = editor.apply_dimensions(config, length=72, width=22).configuration
        config = editor.toggle_edge(config, Edge.BOTTOM).configuration
        config = editor.set_backsplash(config, True).configuration

        first = editor.add_sink(config, "bath-oval")
        second = editor.add_sink(first.configuration, "bath-rect")
        third = editor.add_sink(second.configuration, "bath-oval")
        assert third.reason == RejectionReason.AT_CAPACITY

        config = editor.set_faucet(
            second.configuration, first.sink_id, 3, 8
        ).configuration
        config = editor.set_color(config, "sirius").configuration
        config = editor.set_destination_zip(config, "62704").configuration

        # Buyer quote and server charge agree
        checkout = CheckoutService(fake_gateway, codec=ConfigCodec(field_limit=60))
        quote = checkout.quote(config)
        output = checkout.create_checkout(
            config,
            customer_email="buyer@example.com",
            client_total=quote.summary()["total"],
        )
        assert output.request.amount_cents == quote.total_cents
        assert "cfg_chunks" in output.request.metadata

        # Gateway hands the metadata back on completion
        order = checkout.complete_order(dict(output.request.metadata))
        assert order is not None
        assert order.configuration == config
        assert order.pricing.total_cents == quote.total_cents

        mailer = CutSheetMailer(fake_mailer, business_email="shop@example.com")
        message = mailer.send_cut_sheet(order.configuration, order.customer_email)

        assert message.recipient == "buyer@example.com"
        dxf_text = base64.b64decode(message.attachment_base64).decode("utf-8")
        assert dxf_text == order.dxf
        msp = ezdxf.read(io.StringIO(dxf_text)).modelspace()
        assert len(msp.query("ELLIPSE")) == 1
        assert len(msp.query("CIRCLE[layer=='HOLES']")) == 4

    def test_shape_change_clears_rectangle_options(self, fake_gateway) -> None:
        editor = ConfigurationEditor()
        config = editor.add_sink(editor.new_configuration(), "bath-oval").configuration
        config = editor.toggle_edge(config, Edge.TOP).configuration

        result = editor.apply_shape_change(config, Shape.CIRCLE)
        config = editor.set_destination_zip(result.configuration, "98101").configuration

        output = CheckoutService(fake_gateway).create_checkout(config)
        assert output.request.description.startswith('CIRCLE countertop - 30" dia.')
        assert output.pricing.shipping.multiplier == 1.85
        assert output.pricing.sink_addons == 0
