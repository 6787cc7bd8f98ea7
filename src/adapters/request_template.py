"""Prototype request shared by every dispatch unit.

The template is built once and never mutated: each unit derives its own copy
with `clone(url)` and turns it into an `httpx.Request` bound to its target.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

import httpx
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from core.domain.errors import EncodingError

PLACEHOLDER_URL = "https://bar.com"
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class RequestTemplate:
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        # Freeze the header mapping so shared templates stay read-only.
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def clone(self, url: str) -> RequestTemplate:
        """Independent copy pointing at `url`; everything else is shared as-is."""

        return replace(self, url=url)

    def build_request(self, client: httpx.AsyncClient) -> httpx.Request:
        return client.build_request(
            self.method,
            self.url,
            headers=dict(self.headers),
            content=self.body,
        )


def encode_payload(payload: BaseModel | Any) -> bytes:
    """Serialize `payload` to JSON bytes, raising `EncodingError` on failure."""

    try:
        if isinstance(payload, BaseModel):
            return payload.model_dump_json().encode("utf-8")
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError, PydanticSerializationError) as exc:
        raise EncodingError(f"error marshalling JSON: {exc}") from exc


def build_request_template(
    payload: BaseModel | Any,
    *,
    url: str = PLACEHOLDER_URL,
) -> RequestTemplate:
    """POST template with a JSON body; `url` is only a placeholder."""

    return RequestTemplate(
        method="POST",
        url=url,
        headers={"Content-Type": JSON_CONTENT_TYPE},
        body=encode_payload(payload),
    )
