from fastapi import APIRouter, HTTPException, Request
from schemas.rooms import RoomDetailsResponse
from backend import RoomTable
from logging_config import get_logger

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/rooms", tags=["rooms"])


def _room_details(room_table: RoomTable, room_key: str) -> RoomDetailsResponse:
    members = room_table.members(room_key)
    return RoomDetailsResponse(
        room_key=room_key,
        member_count=len(members),
        members=members,
        is_full=len(members) >= room_table.capacity,
    )


@rooms_router.get("/", response_model=list[RoomDetailsResponse])
async def list_rooms(request: Request):
    room_table: RoomTable = request.app.state.room_table
    logger.debug(f"Listing {len(room_table)} rooms")
    return [_room_details(room_table, room_key) for room_key in room_table.rooms()]


@rooms_router.get("/{room_key}", response_model=RoomDetailsResponse)
async def get_room_details(room_key: str, request: Request):
    room_table: RoomTable = request.app.state.room_table
    if room_key not in room_table:
        logger.debug(f"Room details failed: Room {room_key} not found")
        raise HTTPException(status_code=404, detail="Room not found")
    return _room_details(room_table, room_key)
