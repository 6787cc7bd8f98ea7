"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the edge: the target list is user-supplied JSON.
- The models describe *what* is dispatched, not *how* it travels.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Target(BaseModel):
    """One entry of the input list: an address that may be contacted.

    Immutable once read; each dispatch unit receives its own reference.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    address: str = Field(
        ...,
        alias="location",
        description="Raw address as written in the input list (scheme optional).",
    )


class Payload(BaseModel):
    """Body sent to every destination."""

    data: str = Field(
        default="example data",
        description="Opaque string carried in the JSON body.",
    )


class DispatchOutcome(str, Enum):
    """How a single dispatch unit ended."""

    SENT = "sent"
    SKIPPED = "skipped"
    INVALID_URL = "invalid_url"
    TIMEOUT = "timeout"
    SEND_ERROR = "send_error"
    BODY_READ_ERROR = "body_read_error"

    @property
    def failed(self) -> bool:
        return self not in (DispatchOutcome.SENT, DispatchOutcome.SKIPPED)
