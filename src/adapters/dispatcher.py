"""Dispatch unit: one target, end to end.

Steps for a single target:
    validate -> admit (limiter) -> destination gate -> clone template
    -> send under a deadline -> read body -> report.

Every failure stays inside the unit: it is logged, classified as a
`DispatchOutcome` and never raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

import httpx

from adapters.request_template import RequestTemplate
from core.domain.errors import BodyReadError, InvalidURL, RequestTimeout, SendError
from core.domain.models import DispatchOutcome, Target
from core.domain.urls import validate_url
from core.services.concurrency import ConcurrencyLimiter
from core.services.destination_filter import DestinationFilter

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass
class DispatchHooks:
    """Optional callbacks for UI layers (results, progress)."""

    received: Callable[[str, int, str], None] | None = None
    finished: Callable[[Target, DispatchOutcome], None] | None = None


async def send_with_deadline(
    client: httpx.AsyncClient,
    template: RequestTemplate,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> tuple[int, str]:
    """Send `template` and read the whole body within `timeout` seconds.

    Returns `(status_code, body_text)`. The response is always closed.
    """

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    try:
        request = template.build_request(client)
        response = await asyncio.wait_for(client.send(request, stream=True), timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise RequestTimeout(f"request to {template.url} timed out") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise SendError(str(exc) or exc.__class__.__name__) from exc

    try:
        remaining = max(deadline - loop.time(), 0.0)
        await asyncio.wait_for(response.aread(), remaining)
    except asyncio.TimeoutError as exc:
        raise BodyReadError("deadline exceeded while reading body") from exc
    except httpx.HTTPError as exc:
        raise BodyReadError(str(exc) or exc.__class__.__name__) from exc
    finally:
        await response.aclose()

    return response.status_code, response.text


async def dispatch(
    target: Target,
    template: RequestTemplate,
    limiter: ConcurrencyLimiter,
    *,
    client: httpx.AsyncClient,
    accept: DestinationFilter,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    hooks: DispatchHooks | None = None,
) -> DispatchOutcome:
    hooks = hooks or DispatchHooks()

    try:
        url = validate_url(target.address)
    except InvalidURL as exc:
        logger.warning("Invalid URL: %s (%s)", target.address, exc.reason)
        return DispatchOutcome.INVALID_URL

    async with limiter:
        if not accept(url):
            return DispatchOutcome.SKIPPED

        try:
            status, body = await send_with_deadline(client, template.clone(url), timeout)
        except RequestTimeout:
            logger.warning("Request to %s timed out", url)
            return DispatchOutcome.TIMEOUT
        except SendError as exc:
            logger.error("Error sending request: %s", exc)
            return DispatchOutcome.SEND_ERROR
        except BodyReadError as exc:
            logger.error("Error reading response body: %s", exc)
            return DispatchOutcome.BODY_READ_ERROR

    if hooks.received:
        hooks.received(url, status, body)
    else:
        logger.info("Received data: %s", body)
    return DispatchOutcome.SENT
