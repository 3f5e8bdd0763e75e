"""
Live order broadcasts to staff displays.

Kitchen and counter screens hold a WebSocket open on ``/ws``. Every
event is pushed to the listeners connected at that moment; there is no
history, so a display that connects later only sees later events.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class OrderEvent(str, Enum):
    NEW_ORDER = "newOrder"
    ORDER_UPDATED = "orderUpdated"


class EventPublisher(Protocol):
    async def broadcast(self, event: str, data: Any) -> None: ...


class Broadcaster:
    """Fan-out of JSON events to all connected WebSocket listeners."""

    def __init__(self):
        self._connections: set[WebSocket] = set()
        self.stats = {"messages_broadcast": 0, "total_connections": 0}

    @property
    def listener_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        self.stats["total_connections"] += 1
        logger.info(f"Listener connected ({self.listener_count} active)")

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        logger.info(f"Listener disconnected ({self.listener_count} active)")

    async def broadcast(self, event: str, data: Any) -> None:
        """
        Send ``{"event", "data", "timestamp"}`` to every listener.

        Listeners whose socket fails are dropped; the event still reaches
        the others.
        """
        message = {
            "event": event.value if isinstance(event, Enum) else event,
            "data": data,
            "timestamp": datetime.now().isoformat(),
        }

        dead: list[WebSocket] = []
        for websocket in list(self._connections):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping listener after send failure: {e}")
                dead.append(websocket)

        for websocket in dead:
            self.disconnect(websocket)

        self.stats["messages_broadcast"] += 1
        logger.debug(f"Broadcast {message['event']} to {self.listener_count} listener(s)")
