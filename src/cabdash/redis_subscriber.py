"""Redis pub/sub subscriber feeding ride events to dashboard clients."""

import asyncio
import contextlib
import logging

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisSubscriber:
    """Subscribes to the ride channel and hands each payload to the manager.

    Payloads are forwarded one at a time and in arrival order; the next
    message is not read until every session has processed the previous one.
    """

    def __init__(
        self,
        redis_client,
        connection_manager,
        channel: str = "ride-events",
        reconnect_delay: float = 5.0,
    ):
        self.redis_client = redis_client
        self.connection_manager = connection_manager
        self.channel = channel
        self.task = None
        self.reconnect_delay = reconnect_delay
        self._subscribed = asyncio.Event()

    @property
    def is_subscribed(self) -> bool:
        return self._subscribed.is_set() and self.task is not None and not self.task.done()

    async def start(self, timeout: float = 10.0):
        """Start the subscriber and wait for the subscription to be established."""
        self.task = asyncio.create_task(self._subscribe_and_fanout())
        try:
            await asyncio.wait_for(self._subscribed.wait(), timeout=timeout)
            logger.info(f"Redis subscriber ready - subscribed to {self.channel}")
        except TimeoutError:
            logger.warning("Redis subscription timeout - proceeding anyway")

    async def stop(self):
        if self.task:
            self.task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self.task

    async def _subscribe_and_fanout(self):
        while True:
            try:
                pubsub = self.redis_client.pubsub()
                await pubsub.subscribe(self.channel)
                self._subscribed.set()

                async for message in pubsub.listen():
                    if message["type"] != "message":
                        continue
                    try:
                        await self.connection_manager.dispatch(message["data"])
                    except Exception as e:
                        logger.warning(f"Error dispatching ride event: {e}")

            except redis.ConnectionError:
                self._subscribed.clear()
                logger.error(f"Redis disconnected, reconnecting in {self.reconnect_delay}s...")
                await asyncio.sleep(self.reconnect_delay)
            except asyncio.CancelledError:
                break
