class SignalingError(Exception):
    """Base class for signaling relay errors."""


class CapacityExceeded(SignalingError):
    def __init__(self, room_key: str, capacity: int):
        self.room_key = room_key
        self.capacity = capacity
        super().__init__(f"Room {room_key} already has {capacity} members")


class NotInRoom(SignalingError):
    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        super().__init__(f"Connection {connection_id} is not in a room")
