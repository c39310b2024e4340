"""Tests for the Redis ride subscription."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis

from cabdash.redis_subscriber import RedisSubscriber

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_connection_manager():
    manager = AsyncMock()
    manager.dispatch = AsyncMock()
    return manager


@pytest.fixture
def mock_redis_client():
    return MagicMock()


def create_pubsub_mock(messages):
    """Helper to create a pubsub mock with given messages."""
    pubsub = MagicMock()
    pubsub.subscribe = AsyncMock()
    idx = [0]

    async def mock_listen():
        while idx[0] < len(messages):
            yield messages[idx[0]]
            idx[0] += 1
        while True:
            await asyncio.sleep(1)

    pubsub.listen = mock_listen
    return pubsub


@pytest.mark.asyncio
async def test_subscribes_to_ride_channel(mock_redis_client, mock_connection_manager):
    pubsub = create_pubsub_mock([])
    mock_redis_client.pubsub.return_value = pubsub
    subscriber = RedisSubscriber(mock_redis_client, mock_connection_manager, channel="rides")

    await subscriber.start()

    pubsub.subscribe.assert_awaited_once_with("rides")
    assert subscriber.is_subscribed is True
    await subscriber.stop()


@pytest.mark.asyncio
async def test_forwards_payloads_in_order(mock_redis_client, mock_connection_manager):
    messages = [
        {"type": "subscribe", "channel": "ride-events", "data": 1},
        {"type": "message", "channel": "ride-events", "data": '{"ride_id": "a"}'},
        {"type": "message", "channel": "ride-events", "data": '{"ride_id": "b"}'},
    ]
    mock_redis_client.pubsub.return_value = create_pubsub_mock(messages)
    subscriber = RedisSubscriber(mock_redis_client, mock_connection_manager)

    await subscriber.start()
    await asyncio.sleep(0.02)

    payloads = [call.args[0] for call in mock_connection_manager.dispatch.await_args_list]
    assert payloads == ['{"ride_id": "a"}', '{"ride_id": "b"}']
    await subscriber.stop()


@pytest.mark.asyncio
async def test_dispatch_error_does_not_stop_subscription(
    mock_redis_client, mock_connection_manager
):
    messages = [
        {"type": "message", "channel": "ride-events", "data": "first"},
        {"type": "message", "channel": "ride-events", "data": "second"},
    ]
    mock_redis_client.pubsub.return_value = create_pubsub_mock(messages)
    mock_connection_manager.dispatch.side_effect = [RuntimeError("boom"), None]
    subscriber = RedisSubscriber(mock_redis_client, mock_connection_manager)

    await subscriber.start()
    await asyncio.sleep(0.02)

    assert mock_connection_manager.dispatch.await_count == 2
    assert subscriber.is_subscribed is True
    await subscriber.stop()


@pytest.mark.asyncio
async def test_reconnects_after_connection_error(mock_redis_client, mock_connection_manager):
    failing = MagicMock()
    failing.subscribe = AsyncMock(side_effect=redis.ConnectionError("down"))
    working = create_pubsub_mock(
        [{"type": "message", "channel": "ride-events", "data": "payload"}]
    )
    mock_redis_client.pubsub.side_effect = [failing, working]
    subscriber = RedisSubscriber(
        mock_redis_client, mock_connection_manager, reconnect_delay=0.01
    )

    await subscriber.start(timeout=1.0)
    await asyncio.sleep(0.02)

    mock_connection_manager.dispatch.assert_awaited_once_with("payload")
    await subscriber.stop()


@pytest.mark.asyncio
async def test_stop_cancels_task(mock_redis_client, mock_connection_manager):
    mock_redis_client.pubsub.return_value = create_pubsub_mock([])
    subscriber = RedisSubscriber(mock_redis_client, mock_connection_manager)

    await subscriber.start()
    await subscriber.stop()

    assert subscriber.task.done()
    assert subscriber.is_subscribed is False
