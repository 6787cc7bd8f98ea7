"""Error taxonomy of the dispatcher.

Two families:
- Startup errors (`InputError`, `EncodingError`) abort the whole run.
- Per-target errors (`InvalidURL`, `RequestTimeout`, `SendError`,
  `BodyReadError`) are logged and stay inside the failing dispatch unit.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for every error raised by posthaste."""


class InputError(DispatchError):
    """The target list could not be read or is not a list of records."""


class EncodingError(DispatchError):
    """The request payload could not be serialized."""


class InvalidURL(DispatchError):
    """A target address is not a usable URL."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"{raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class RequestTimeout(DispatchError):
    """The request did not complete before its deadline."""


class SendError(DispatchError):
    """The request failed at the transport level (DNS, connect, TLS, ...)."""


class BodyReadError(DispatchError):
    """The response arrived but its body could not be read completely."""
