import ipaddress
from typing import Any, Iterable, List, Optional
import events
from backend import RoomTable
from constants import IPADDR_EXCLUDE
from errors import CapacityExceeded, NotInRoom
from interfaces import AddressSource, host_addresses
from registry import ConnectionRegistry
from logging_config import get_logger

logger = get_logger(__name__)


class SessionCoordinator:
    """Room state machine and relay routing for two-party signaling.

    Every room moves Empty -> One-Member -> Full on joins and back on
    departures. Handlers never suspend: emitting only queues frames, so each
    handler runs to completion on the event loop and membership changes from
    different connections never interleave.
    """

    def __init__(
        self,
        room_table: RoomTable,
        registry: ConnectionRegistry,
        address_source: AddressSource = host_addresses,
        ipaddr_exclude: Optional[Iterable[str]] = None,
    ):
        self.room_table = room_table
        self.registry = registry
        self.address_source = address_source
        self.ipaddr_exclude = set(IPADDR_EXCLUDE if ipaddr_exclude is None else ipaddr_exclude)
        self._handlers = {
            events.CREATE_OR_JOIN: self.create_or_join,
            events.MESSAGE: self.relay_message,
            events.TURN_ON_VIDEO: self.turn_on_video,
            events.TURN_OFF_VIDEO: self.turn_off_video,
            events.BYE: self.leave,
            events.IPADDR: self.discover_addresses,
        }

    def dispatch(self, connection_id: str, event: str, args: List[Any]):
        handler = self._handlers.get(event)
        if handler is None:
            logger.debug(f"Ignoring unknown event {event!r} from connection {connection_id}")
            self.log(connection_id, f"Unknown event {event}")
            return
        handler(connection_id, *args)

    def disconnect(self, connection_id: str):
        """Transport-level disconnect; same cleanup as `bye`."""
        self.leave(connection_id)

    def log(self, connection_id: str, *parts: Any):
        logger.debug(f"[{connection_id}] {' '.join(str(p) for p in parts)}")
        self.registry.emit_to_self(connection_id, events.LOG, [events.LOG_PREFIX, *parts])

    def require_room(self, connection_id: str) -> str:
        room_key = self.room_table.find_room_of(connection_id)
        if room_key is None:
            raise NotInRoom(connection_id)
        return room_key

    def create_or_join(self, connection_id: str, room_key: Any = None, *_):
        if not isinstance(room_key, str):
            self.log(connection_id, f"Invalid room {room_key!r}")
            return

        self.log(connection_id, f"Received request to create or join room {room_key}")

        current_room = self.room_table.find_room_of(connection_id)
        if current_room == room_key:
            self.log(connection_id, f"Client ID {connection_id} is already in room {room_key}")
            return

        num_clients = self.room_table.member_count(room_key)
        self.log(connection_id, f"Room {room_key} now has {num_clients} client(s)")

        if num_clients >= self.room_table.capacity:
            logger.info(f"Connection {connection_id} rejected: room {room_key} is full")
            self.registry.emit_to_self(connection_id, events.FULL, room_key)
            return

        # A connection belongs to at most one room; switching leaves the old one
        if current_room is not None:
            self.leave(connection_id)

        try:
            self.room_table.add_member(room_key, connection_id)
        except CapacityExceeded:
            self.registry.emit_to_self(connection_id, events.FULL, room_key)
            return

        if num_clients == 0:
            logger.info(f"Connection {connection_id} created room {room_key}")
            self.log(connection_id, f"Client ID {connection_id} created and joined room {room_key}")
            self.registry.emit_to_self(connection_id, events.CREATED, room_key, connection_id)
        else:
            logger.info(f"Connection {connection_id} joined room {room_key}")
            self.log(connection_id, f"Client ID {connection_id} joined room {room_key}")
            self.registry.emit_to_room(room_key, events.JOIN, room_key)
            self.registry.emit_to_self(connection_id, events.JOINED, room_key, connection_id)
            # `ready` tells both peers to start the offer/answer exchange
            self.registry.emit_to_room(room_key, events.READY)

    def relay_message(self, connection_id: str, *payload: Any):
        try:
            room_key = self.require_room(connection_id)
        except NotInRoom:
            return
        self.log(connection_id, f"Client in room {room_key} said:", *payload)
        self.registry.emit_to_room(room_key, events.MESSAGE, *payload)

    def turn_on_video(self, connection_id: str, *_):
        self._notify_peer(connection_id, events.TURN_ON_VIDEO)

    def turn_off_video(self, connection_id: str, *_):
        self._notify_peer(connection_id, events.TURN_OFF_VIDEO)

    def _notify_peer(self, connection_id: str, event: str):
        try:
            room_key = self.require_room(connection_id)
        except NotInRoom:
            return
        self.registry.emit_to_room(room_key, event, connection_id, exclude=connection_id)

    def leave(self, connection_id: str, *_):
        try:
            room_key = self.require_room(connection_id)
        except NotInRoom:
            return

        self.room_table.remove_member(room_key, connection_id)
        logger.info(f"Connection {connection_id} left room {room_key}")
        self.registry.emit_to_room(room_key, events.PARTICIPANT_LEFT, connection_id, exclude=connection_id)

    def discover_addresses(self, connection_id: str, *_):
        for record in self.address_source():
            if record.family != "IPv4" or record.address in self.ipaddr_exclude:
                continue
            if ipaddress.ip_address(record.address).is_loopback:
                continue
            self.registry.emit_to_self(connection_id, events.IPADDR, record.address)
