"""Destination gate applied after URL validation.

Only validated addresses accepted by the filter are contacted; the rest are
skipped silently. The default is an allow-list of a single endpoint.
"""

from __future__ import annotations

from typing import Callable, Iterable

from core.config import AppSettings

DestinationFilter = Callable[[str], bool]


def exact_match(endpoints: Iterable[str]) -> DestinationFilter:
    """Accept only addresses equal (string-wise) to one of `endpoints`."""

    allowed = frozenset(endpoints)

    def accept(url: str) -> bool:
        return url in allowed

    return accept


def allow_all() -> DestinationFilter:
    return lambda url: True


def from_settings(settings: AppSettings) -> DestinationFilter:
    if settings.allow_any_destination:
        return allow_all()
    return exact_match(settings.allowed_destinations)
