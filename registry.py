import asyncio
import uuid
from typing import Any, Dict, Optional
from fastapi import WebSocket
from backend import RoomTable
from schemas.events import OutboundEvent
from logging_config import get_logger

logger = get_logger(__name__)


class ConnectionRegistry:
    """Tracks live websocket connections and routes outbound events to them.

    Each connection has its own outbox drained by a sender task, so emitting
    never waits on a peer. Delivery is best-effort: a connection that vanished
    or fails to send is logged and skipped, never retried.
    """

    def __init__(self, room_table: RoomTable):
        self.room_table = room_table
        self.active_connections: Dict[str, WebSocket] = {}
        self._outboxes: Dict[str, asyncio.Queue] = {}
        self._senders: Dict[str, asyncio.Task] = {}

    def register(self, websocket: WebSocket) -> str:
        """Track a websocket and start its sender task; needs a running loop."""
        connection_id = str(uuid.uuid4())
        outbox = asyncio.Queue()
        self.active_connections[connection_id] = websocket
        self._outboxes[connection_id] = outbox
        self._senders[connection_id] = asyncio.create_task(self._drain(connection_id, websocket, outbox))
        logger.debug(f"Registered connection {connection_id} (active: {len(self.active_connections)})")
        return connection_id

    def unregister(self, connection_id: str):
        """Forget a connection; frames still queued for it are dropped."""
        self._outboxes.pop(connection_id, None)
        sender = self._senders.pop(connection_id, None)
        if sender is not None:
            sender.cancel()
        if self.active_connections.pop(connection_id, None) is not None:
            logger.debug(f"Unregistered connection {connection_id} (active: {len(self.active_connections)})")

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self.active_connections

    def emit_to_self(self, connection_id: str, event: str, *args: Any):
        outbox = self._outboxes.get(connection_id)
        if outbox is None:
            logger.debug(f"Dropping {event} for vanished connection {connection_id}")
            return
        outbox.put_nowait(OutboundEvent(event=event, args=list(args)).model_dump_json())

    def emit_to_room(self, room_key: str, event: str, *args: Any, exclude: Optional[str] = None):
        for connection_id in self.room_table.members(room_key):
            if connection_id == exclude:
                continue
            self.emit_to_self(connection_id, event, *args)

    async def flush(self, *connection_ids: str):
        """Wait until the outboxes of the given connections (default: all) are sent."""
        targets = connection_ids or list(self._outboxes)
        outboxes = [self._outboxes[c] for c in targets if c in self._outboxes]
        await asyncio.gather(*(outbox.join() for outbox in outboxes))

    async def _drain(self, connection_id: str, websocket: WebSocket, outbox: asyncio.Queue):
        while True:
            frame = await outbox.get()
            try:
                await websocket.send_text(frame)
            except Exception as e:
                logger.warning(f"Error sending to connection {connection_id}: {e}")
            finally:
                outbox.task_done()
