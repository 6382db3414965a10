"""Render orchestration: synchronous renders and async job polling."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from canvelete.domain.errors import RenderTimeoutError
from canvelete.domain.value_objects import AsyncRenderTicket, RenderJob, RenderRequest
from canvelete.interfaces.render_api import RenderApi

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 2000
DEFAULT_WAIT_TIMEOUT_MS = 300_000

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], float]


class RenderOrchestrator:
    """Validates render requests and drives the render endpoints.

    Args:
        api: The API to render against.
        sleep: Awaitable sleep used between status polls (seconds).
        clock: Monotonic clock in seconds, used for the wait timeout.
    """

    def __init__(
        self,
        api: RenderApi,
        *,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self.api = api
        self._sleep = sleep
        self._clock = clock

    async def render_sync(self, request: RenderRequest) -> bytes:
        """Render and return the binary result.

        Raises:
            ValidationError: Before any request, if `request` is invalid.
            HttpError: If the server rejects the render.
        """
        request.validate()
        logger.debug("Rendering %s as %s", request.target_id, request.format)
        data = await self.api.render(request.to_payload())
        logger.debug("Rendered %s (%d bytes)", request.target_id, len(data))
        return data

    async def render_async(self, request: RenderRequest) -> AsyncRenderTicket:
        """Submit an async render and return without waiting for it."""
        request.validate()
        payload = await self.api.render_async(request.to_payload(async_=True))
        ticket = AsyncRenderTicket.from_payload(payload)
        logger.info("Started render job %s (%s)", ticket.job_id, ticket.status.value)
        return ticket

    async def poll_status(self, job_id: str) -> RenderJob:
        """Fetch the job's current state once."""
        return RenderJob.from_payload(await self.api.get_render_status(job_id))

    async def wait_for_completion(
        self,
        job_id: str,
        timeout_ms: int = DEFAULT_WAIT_TIMEOUT_MS,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        on_poll: Callable[[RenderJob], None] | None = None,
    ) -> RenderJob:
        """Poll until the job is completed or failed.

        Polls run strictly one after another with `poll_interval_ms` between
        them; the first terminal observation is returned without further
        polls. A failed job is returned, not raised.

        Raises:
            RenderTimeoutError: If `timeout_ms` elapses first.
        """
        start = self._clock()
        last: RenderJob | None = None
        while (self._clock() - start) * 1000 < timeout_ms:
            last = await self.poll_status(job_id)
            if on_poll is not None:
                on_poll(last)
            if last.status.is_terminal:
                logger.info("Render job %s %s", job_id, last.status.value)
                return last
            logger.debug("Render job %s is %s", job_id, last.status.value)
            await self._sleep(poll_interval_ms / 1000)

        raise RenderTimeoutError(job_id, timeout_ms, last.status.value if last else None)
