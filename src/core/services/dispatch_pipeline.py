"""Dispatch orchestration.

The CLI delegates the whole run to these helpers: load the target list, build
the shared request template once, launch one task per target and wait for
all of them through the completion tracker. Side effects on the console stay
in the CLI via `DispatchHooks`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Sequence

import httpx

from adapters.dispatcher import DispatchHooks, dispatch
from adapters.http_client import build_async_client
from adapters.request_template import RequestTemplate, build_request_template
from adapters.targets_loader import load_targets
from core.config import AppSettings
from core.domain.models import Payload, Target
from core.services import destination_filter
from core.services.concurrency import CompletionTracker, ConcurrencyLimiter
from core.services.destination_filter import DestinationFilter

logger = logging.getLogger(__name__)


async def _run_unit(
    target: Target,
    template: RequestTemplate,
    limiter: ConcurrencyLimiter,
    tracker: CompletionTracker,
    *,
    client: httpx.AsyncClient,
    accept: DestinationFilter,
    timeout: float,
    hooks: DispatchHooks,
) -> None:
    try:
        outcome = await dispatch(
            target,
            template,
            limiter,
            client=client,
            accept=accept,
            timeout=timeout,
            hooks=hooks,
        )
        if hooks.finished:
            hooks.finished(target, outcome)
    except Exception:
        logger.exception("Unexpected failure while dispatching to %s", target.address)
    finally:
        tracker.done()


async def dispatch_all(
    *,
    settings: AppSettings,
    targets: Sequence[Target],
    template: RequestTemplate,
    client: httpx.AsyncClient,
    accept: DestinationFilter | None = None,
    limiter: ConcurrencyLimiter | None = None,
    hooks: DispatchHooks | None = None,
) -> None:
    """Fire one unit per target and block until every unit has terminated.

    Units are independent: a failure in one never cancels or delays another.
    There is no global cancellation; the call returns on natural completion.
    """

    hooks = hooks or DispatchHooks()
    accept = accept or destination_filter.from_settings(settings)
    limiter = limiter or ConcurrencyLimiter(settings.max_concurrency)

    tracker = CompletionTracker()
    tracker.add(len(targets))

    running: set[asyncio.Task[None]] = set()
    for target in targets:
        task = asyncio.create_task(
            _run_unit(
                target,
                template,
                limiter,
                tracker,
                client=client,
                accept=accept,
                timeout=settings.request_timeout_seconds,
                hooks=hooks,
            )
        )
        running.add(task)
        task.add_done_callback(running.discard)

    await tracker.wait()
    logger.debug("All %d dispatch units finished", len(targets))


async def run_dispatch(
    *,
    settings: AppSettings,
    input_path: Path | None = None,
    payload: Payload | None = None,
    accept: DestinationFilter | None = None,
    hooks: DispatchHooks | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Full run: load targets, build the template, dispatch, wait.

    Raises `InputError` or `EncodingError` before any request is made.
    Returns the number of targets dispatched.
    """

    targets = load_targets(input_path or settings.input_path)
    template = build_request_template(payload or Payload(data=settings.payload_data))
    logger.debug("Loaded %d targets", len(targets))

    async with build_async_client(settings, transport=transport) as client:
        await dispatch_all(
            settings=settings,
            targets=targets,
            template=template,
            client=client,
            accept=accept,
            hooks=hooks,
        )
    return len(targets)
