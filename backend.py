from typing import Dict, List, Optional
from constants import ROOM_CAPACITY
from errors import CapacityExceeded
from logging_config import get_logger

logger = get_logger(__name__)


class RoomTable:
    """Authoritative in-memory room membership.

    Maps room key -> ordered list of member connection ids. A room with no
    members is never stored. A second mapping, connection id -> room key, is
    kept in step with every add/remove so lookups never scan all rooms.
    """

    def __init__(self, capacity: int = ROOM_CAPACITY):
        self.capacity = capacity
        self._rooms: Dict[str, List[str]] = {}
        self._connection_rooms: Dict[str, str] = {}
        logger.info(f"Initializing RoomTable with capacity {capacity}")

    def __contains__(self, room_key: str) -> bool:
        return room_key in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def member_count(self, room_key: str) -> int:
        return len(self._rooms.get(room_key, ()))

    def members(self, room_key: str) -> List[str]:
        return list(self._rooms.get(room_key, ()))

    def add_member(self, room_key: str, connection_id: str):
        members = self._rooms.get(room_key, [])
        if len(members) >= self.capacity:
            raise CapacityExceeded(room_key, self.capacity)

        if not members:
            logger.info(f"Creating room {room_key}")
        members.append(connection_id)
        self._rooms[room_key] = members
        self._connection_rooms[connection_id] = room_key
        logger.debug(f"Connection {connection_id} added to room {room_key} ({len(members)}/{self.capacity})")

    def remove_member(self, room_key: str, connection_id: str):
        """Remove a connection from a room, deleting the room once it is empty."""
        members = self._rooms.get(room_key)
        if not members or connection_id not in members:
            logger.debug(f"Connection {connection_id} is not a member of room {room_key}")
            return

        members.remove(connection_id)
        if self._connection_rooms.get(connection_id) == room_key:
            del self._connection_rooms[connection_id]
        logger.debug(f"Connection {connection_id} removed from room {room_key} ({len(members)}/{self.capacity})")

        if not members:
            del self._rooms[room_key]
            logger.info(f"Room {room_key} is empty, deleting it")

    def find_room_of(self, connection_id: str) -> Optional[str]:
        return self._connection_rooms.get(connection_id)

    def rooms(self) -> Dict[str, List[str]]:
        """Snapshot of every room and its members."""
        return {room_key: list(members) for room_key, members in self._rooms.items()}
