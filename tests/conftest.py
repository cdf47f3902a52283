"""Pytest configuration and shared fixtures for countertop tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from countertops.application import ConfigurationEditor
from countertops.contracts import (
    CutSheetEmail,
    PaymentRequest,
    PaymentSession,
)
from countertops.domain import (
    Configuration,
    Edge,
    PricingEngine,
    RectangleDimensions,
    Shape,
    SinkPlacementEngine,
)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: end-to-end tests across several layers"
    )


# =============================================================================
# Collaborator fakes
# =============================================================================


class FakeGateway:
    """Payment gateway that records requests and returns numbered sessions."""

    def __init__(self) -> None:
        self.requests: list[PaymentRequest] = []

    def create_session(self, request: PaymentRequest) -> PaymentSession:
        self.requests.append(request)
        number = len(self.requests)
        return PaymentSession(
            session_id=f"cs_test_{number}",
            url=f"https://pay.example.com/c/cs_test_{number}",
        )


class FakeMailer:
    """Email sender that keeps sent messages in memory."""

    def __init__(self) -> None:
        self.sent: list[CutSheetEmail] = []

    def send(self, message: CutSheetEmail) -> None:
        self.sent.append(message)


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def editor() -> ConfigurationEditor:
    return ConfigurationEditor()


@pytest.fixture
def placement_engine() -> SinkPlacementEngine:
    return SinkPlacementEngine()


@pytest.fixture
def pricing_engine() -> PricingEngine:
    return PricingEngine()


@pytest.fixture
def default_config() -> Configuration:
    """New design: 36 x 25.5 rectangle, no options."""
    return Configuration()


@pytest.fixture
def polished_vanity() -> Configuration:
    """36 x 25.5 rectangle with every edge polished, shipping to the shop ZIP."""
    return Configuration(
        shape=Shape.RECTANGLE,
        dimensions=RectangleDimensions(length=36.0, width=25.5),
        polished_edges=frozenset(Edge),
        destination_zip="63052",
    )


@pytest.fixture
def double_vanity(editor: ConfigurationEditor) -> Configuration:
    """72 x 22 rectangle with two bath sinks, a backsplash and one 3-hole faucet.

    The bath oval sits at (36, 11) and the bath rectangle at (57.5, 11).
    """
    config = editor.apply_dimensions(Configuration(), length=72, width=22).configuration
    config = editor.set_backsplash(config, True).configuration
    config = editor.toggle_edge(config, Edge.BOTTOM).configuration
    first = editor.add_sink(config, "bath-oval")
    config = editor.add_sink(first.configuration, "bath-rect").configuration
    config = editor.set_faucet(config, first.sink_id, 3, 8).configuration
    return editor.set_destination_zip(config, "62704").configuration


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def fake_mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a JSON document into tmp_path and return its path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
