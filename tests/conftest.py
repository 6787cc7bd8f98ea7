from __future__ import annotations

import asyncio

import httpx
import pytest

from core.config import AppSettings


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, request_timeout_seconds=1.0)


class RecordingHandler:
    """MockTransport handler that records requests and tracks in-flight calls."""

    def __init__(self, body: bytes = b"ok", status: int = 200, delay: float = 0.0) -> None:
        self.body = body
        self.status = status
        self.delay = delay
        self.requests: list[httpx.Request] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return httpx.Response(self.status, content=self.body)
        finally:
            self.in_flight -= 1


@pytest.fixture
def recording_handler() -> RecordingHandler:
    return RecordingHandler()
