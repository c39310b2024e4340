"""WebSocket endpoint and per-client session fan-out."""

import json
import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from .events import decode_ride_event
from .metrics import get_metrics_collector
from .presentation import OutboundMessage
from .session import DashboardSession
from .settings import DashboardSettings
from .ticker import RenderTicker

logger = logging.getLogger(__name__)

router = APIRouter()


class ClientConnection:
    """A websocket together with its session and refresh ticker."""

    def __init__(
        self,
        websocket: WebSocket,
        settings: DashboardSettings,
        on_send_error: Callable[[Exception], Awaitable[None]] | None = None,
    ):
        self.websocket = websocket
        self.session = DashboardSession(max_cards=settings.max_ride_cards)
        self.ticker = RenderTicker(
            self.session,
            send=self.send_message,
            interval_seconds=settings.refresh_interval_seconds,
            on_error=on_send_error,
        )

    async def send_message(self, message: OutboundMessage) -> None:
        if self.websocket.application_state == WebSocketState.CONNECTED:
            await self.websocket.send_json(message)

    async def send_messages(self, messages: list[OutboundMessage]) -> None:
        for message in messages:
            await self.send_message(message)


class ConnectionManager:
    """Manages dashboard clients; each one gets an isolated session."""

    def __init__(self, settings: DashboardSettings | None = None):
        self.settings = settings or DashboardSettings()
        self.connections: dict[WebSocket, ClientConnection] = {}

    @property
    def active_connections(self) -> set[WebSocket]:
        return set(self.connections)

    def get_session(self, websocket: WebSocket) -> DashboardSession | None:
        connection = self.connections.get(websocket)
        return connection.session if connection else None

    async def connect(self, websocket: WebSocket) -> ClientConnection:
        await websocket.accept()
        connection = ClientConnection(
            websocket, self.settings, on_send_error=self._send_error_handler(websocket)
        )
        self.connections[websocket] = connection
        get_metrics_collector().record_session_opened()

        await connection.send_messages(connection.session.connect())
        connection.ticker.start()
        return connection

    def _send_error_handler(
        self, websocket: WebSocket
    ) -> Callable[[Exception], Awaitable[None]]:
        """A failed card send means the socket is gone; drop the client."""

        async def handle(error: Exception) -> None:
            get_metrics_collector().record_send_error()
            await self.disconnect(websocket)

        return handle

    async def disconnect(self, websocket: WebSocket) -> None:
        """Transport close: stop refreshing and discard the session."""
        connection = self.connections.pop(websocket, None)
        if connection is None:
            return
        await connection.ticker.stop()
        connection.session.disconnect(user_initiated=False)
        get_metrics_collector().record_session_closed()

    async def handle_control(self, websocket: WebSocket, action: str) -> None:
        """Apply a connect/disconnect toggle requested by the user."""
        connection = self.connections.get(websocket)
        if connection is None:
            return

        if action == "disconnect":
            await connection.ticker.stop()
            await connection.send_messages(connection.session.disconnect(user_initiated=True))
        elif action == "connect":
            if connection.session.connected:
                return
            await connection.send_messages(connection.session.connect())
            connection.ticker.start()
        else:
            logger.warning(f"Unknown control action: {action}")

    async def dispatch(self, payload: bytes | str) -> None:
        """Decode one transport payload and apply it to every session."""
        event = decode_ride_event(payload)
        if event is None:
            return

        collector = get_metrics_collector()
        collector.record_consume()

        for websocket, connection in list(self.connections.items()):
            messages = connection.session.process(event)
            for message in messages:
                if message["type"] == "notification":
                    collector.record_notification(event.ride_status)
            try:
                await connection.send_messages(messages)
            except Exception as e:
                logger.warning(f"Error sending to {connection.session.session_id}: {e}")
                collector.record_send_error()
                await self.disconnect(websocket)

    async def close_all(self) -> None:
        for websocket in list(self.connections):
            await self.disconnect(websocket)


def parse_control_action(text: str) -> str | None:
    """Extract the action from a client control message."""
    try:
        message = json.loads(text)
    except json.JSONDecodeError:
        logger.warning(f"Invalid control message: {text!r}")
        return None
    if not isinstance(message, dict):
        return None
    action = message.get("action")
    return action if isinstance(action, str) else None


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    manager: ConnectionManager = websocket.app.state.connection_manager
    await manager.connect(websocket)

    try:
        while True:
            text = await websocket.receive_text()
            action = parse_control_action(text)
            if action:
                await manager.handle_control(websocket, action)

    except WebSocketDisconnect:
        logger.debug("Dashboard client closed the connection")
    finally:
        await manager.disconnect(websocket)
