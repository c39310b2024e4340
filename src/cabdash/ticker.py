"""Periodic card refresh for a dashboard session."""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from .presentation import OutboundMessage
from .session import DashboardSession

logger = logging.getLogger(__name__)


class RenderTicker:
    """Runs ``session.tick()`` on a fixed wall-clock period.

    Ticks are independent of event arrival. The ticker is stopped while the
    session is disconnected and started again on reconnect. A failed tick
    does not end the loop; ``on_error`` decides whether the connection is
    gone, and may stop the ticker from inside the failing tick.
    """

    def __init__(
        self,
        session: DashboardSession,
        send: Callable[[OutboundMessage], Awaitable[None]],
        interval_seconds: float = 3.0,
        on_error: Callable[[Exception], Awaitable[None]] | None = None,
    ):
        self.session = session
        self.send = send
        self.interval_seconds = interval_seconds
        self.on_error = on_error
        self.task: asyncio.Task | None = None
        self.ticks = 0
        self.errors = 0

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self) -> None:
        if self.running:
            return
        self.task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        task, self.task = self.task, None
        if task is None or task is asyncio.current_task():
            # Called from within a tick: _run returns once the tick unwinds
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def tick_once(self) -> int:
        """Render one tick; returns the number of cards sent."""
        messages = self.session.tick()
        for message in messages:
            await self.send(message)
        self.ticks += 1
        return len(messages)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.tick_once()
            except Exception as e:
                self.errors += 1
                logger.warning(f"Card refresh failed for {self.session.session_id}: {e}")
                if self.on_error is not None:
                    await self.on_error(e)
                if self.task is not asyncio.current_task():
                    return
