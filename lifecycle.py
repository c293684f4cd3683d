from typing import Optional
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from coordinator import SessionCoordinator
from registry import ConnectionRegistry
from schemas.events import InboundEvent
from logging_config import get_logger

logger = get_logger(__name__)


class ConnectionLifecycle:
    """Wires one websocket into the coordinator for the connection's lifetime."""

    def __init__(self, websocket: WebSocket, registry: ConnectionRegistry, coordinator: SessionCoordinator):
        self.websocket = websocket
        self.registry = registry
        self.coordinator = coordinator
        self.connection_id: Optional[str] = None
        self._closed = False

    async def run(self):
        await self.websocket.accept()
        self.connection_id = self.registry.register(self.websocket)
        logger.info(f"Connection {self.connection_id} opened")

        try:
            while True:
                message = await self.websocket.receive()
                if message.get("type") == "websocket.disconnect":
                    logger.info(f"Connection {self.connection_id} disconnected")
                    break

                text = message.get("text")
                if text is None:
                    self.coordinator.log(self.connection_id, "Binary frames are not supported")
                    continue
                self.handle_frame(text)
        except WebSocketDisconnect:
            logger.info(f"Connection {self.connection_id} disconnected")
        except Exception as e:
            logger.error(f"Error handling connection {self.connection_id}: {e}", exc_info=True)
        finally:
            self.close()

    def handle_frame(self, data: str):
        try:
            frame = InboundEvent.model_validate_json(data)
        except ValidationError as e:
            logger.debug(f"Malformed frame from connection {self.connection_id}: {e}")
            self.coordinator.log(self.connection_id, "Malformed frame ignored")
            return
        self.coordinator.dispatch(self.connection_id, frame.event, frame.args)

    def close(self):
        """Disconnect cleanup; runs at most once per connection."""
        if self._closed or self.connection_id is None:
            return
        self._closed = True
        try:
            self.coordinator.disconnect(self.connection_id)
        finally:
            self.registry.unregister(self.connection_id)
            logger.debug(f"Connection {self.connection_id} cleaned up")
