from pydantic import BaseModel


class RoomDetailsResponse(BaseModel):
    room_key: str
    member_count: int
    members: list[str]
    is_full: bool
