"""Compact transport encoding for configurations.

A configuration is serialized to canonical JSON (sorted keys, no whitespace)
and then to URL-safe base64 without padding. Payment metadata limits each
field to 500 characters, so long tokens are split across ``cfg_0``,
``cfg_1``... with the count in ``cfg_chunks``.

Decoding fails closed: anything malformed comes back as ``None``. Decoded
dimensions are clamped into their legal ranges, so a decoded configuration
prices the same wherever it is decoded.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from countertops.domain import (
    CircleDimensions,
    Configuration,
    Edge,
    FaucetHoles,
    FaucetOption,
    FaucetSpread,
    PolygonDimensions,
    RectangleDimensions,
    Shape,
    SinkPlacement,
)
from countertops.domain.services import clamp_dimensions
from countertops.domain.value_objects import ordered_edges

__all__ = ["CODEC_VERSION", "FIELD_LIMIT", "ConfigCodec"]

logger = logging.getLogger(__name__)

CODEC_VERSION = 1
FIELD_LIMIT = 500

SINGLE_FIELD = "cfg"
CHUNK_COUNT_FIELD = "cfg_chunks"
CHUNK_PREFIX = "cfg_"

_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class _DimensionsPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    L: float | None = None
    W: float | None = None
    D: float | None = None
    n: int | None = None
    A: float | None = None


class _SinkPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    t: str
    x: float
    y: float
    holes: Literal[1, 3] = 1
    spread: Literal[4, 8] | None = None


class _ConfigPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    v: Literal[1]
    shape: Shape
    dims: _DimensionsPayload
    sinks: list[_SinkPayload] = Field(default_factory=list, max_length=2)
    edges: list[Edge] = Field(default_factory=list)
    bs: bool = False
    color: str
    zip: str = ""


class ConfigCodec:
    """Encodes configurations into transport tokens and metadata fields."""

    def __init__(self, field_limit: int = FIELD_LIMIT) -> None:
        if field_limit < 1:
            raise ValueError("field_limit must be positive")
        self.field_limit = field_limit

    # --- Tokens ---

    def encode(self, configuration: Configuration) -> str:
        """Serialize a configuration to a single URL-safe token."""
        payload = json.dumps(
            self.to_payload(configuration), sort_keys=True, separators=(",", ":")
        )
        return (
            base64.urlsafe_b64encode(payload.encode("utf-8"))
            .rstrip(b"=")
            .decode("ascii")
        )

    def decode(self, token: str) -> Configuration | None:
        """Rebuild a configuration from a token, or None if it is malformed."""
        if not isinstance(token, str) or not _TOKEN_PATTERN.match(token):
            logger.warning("Rejected configuration token: not URL-safe base64")
            return None
        try:
            raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
            payload = _ConfigPayload.model_validate_json(raw)
            return self._from_payload(payload)
        except ValidationError as e:
            logger.warning(
                f"Rejected configuration token: {e.error_count()} schema error(s)"
            )
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Rejected configuration token: {e}")
        return None

    # --- Metadata fields ---

    def to_fields(self, configuration: Configuration) -> dict[str, str]:
        """Token as metadata fields, chunked when it exceeds the field limit."""
        token = self.encode(configuration)
        if len(token) <= self.field_limit:
            return {SINGLE_FIELD: token}
        chunks = [
            token[start : start + self.field_limit]
            for start in range(0, len(token), self.field_limit)
        ]
        fields = {f"{CHUNK_PREFIX}{index}": chunk for index, chunk in enumerate(chunks)}
        fields[CHUNK_COUNT_FIELD] = str(len(chunks))
        return fields

    def from_fields(self, fields: Mapping[str, Any]) -> Configuration | None:
        """Reassemble and decode metadata fields; None if absent or malformed."""
        token = self.join_fields(fields)
        if token is None:
            return None
        return self.decode(token)

    def join_fields(self, fields: Mapping[str, Any]) -> str | None:
        """Concatenate the token carried in metadata fields."""
        single = fields.get(SINGLE_FIELD)
        if single:
            return str(single)

        count_raw = fields.get(CHUNK_COUNT_FIELD)
        if count_raw is None:
            logger.warning("No configuration token in metadata")
            return None
        count_text = str(count_raw).strip()
        if not count_text.isdigit() or int(count_text) < 1:
            logger.warning(f"Invalid chunk count in metadata: {count_raw!r}")
            return None

        parts: list[str] = []
        for index in range(int(count_text)):
            chunk = fields.get(f"{CHUNK_PREFIX}{index}")
            if not chunk:
                logger.warning(f"Missing configuration chunk {index} of {count_text}")
                return None
            parts.append(str(chunk))
        return "".join(parts)

    # --- Payload mapping ---

    @staticmethod
    def to_payload(configuration: Configuration) -> dict[str, Any]:
        dims = configuration.dimensions
        if isinstance(dims, RectangleDimensions):
            dims_payload: dict[str, Any] = {"L": dims.length, "W": dims.width}
        elif isinstance(dims, CircleDimensions):
            dims_payload = {"D": dims.diameter}
        else:
            dims_payload = {"n": dims.side_count, "A": dims.side_length}

        return {
            "v": CODEC_VERSION,
            "shape": configuration.shape.value,
            "dims": dims_payload,
            "sinks": [
                {
                    "id": sink.sink_id,
                    "t": sink.template_key,
                    "x": round(sink.x, 2),
                    "y": round(sink.y, 2),
                    "holes": sink.faucet.holes.value,
                    "spread": sink.faucet.spread.value if sink.faucet.spread else None,
                }
                for sink in configuration.sinks
            ],
            "edges": [edge.value for edge in ordered_edges(configuration.polished_edges)],
            "bs": configuration.backsplash,
            "color": configuration.color_key,
            "zip": configuration.destination_zip,
        }

    @staticmethod
    def _from_payload(payload: _ConfigPayload) -> Configuration:
        dims = payload.dims
        if payload.shape == Shape.RECTANGLE:
            if dims.L is None or dims.W is None:
                raise ValueError("Rectangle payload needs L and W")
            dimensions: Any = RectangleDimensions(length=dims.L, width=dims.W)
        elif payload.shape == Shape.CIRCLE:
            if dims.D is None:
                raise ValueError("Circle payload needs D")
            dimensions = CircleDimensions(diameter=dims.D)
        else:
            if dims.n is None or dims.A is None:
                raise ValueError("Polygon payload needs n and A")
            dimensions = PolygonDimensions(side_count=dims.n, side_length=dims.A)

        sinks = tuple(
            SinkPlacement(
                sink_id=sink.id,
                template_key=sink.t,
                x=sink.x,
                y=sink.y,
                faucet=FaucetOption(
                    holes=FaucetHoles(sink.holes),
                    spread=FaucetSpread(sink.spread) if sink.spread else None,
                ),
            )
            for sink in payload.sinks
        )
        return Configuration(
            shape=payload.shape,
            dimensions=clamp_dimensions(dimensions),
            polished_edges=frozenset(payload.edges),
            backsplash=payload.bs,
            sinks=sinks,
            color_key=payload.color,
            destination_zip=payload.zip,
        )
