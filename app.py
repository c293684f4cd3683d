from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from routers.rooms import rooms_router
from backend import RoomTable
from registry import ConnectionRegistry
from coordinator import SessionCoordinator
from lifecycle import ConnectionLifecycle
from interfaces import AddressSource, host_addresses
from constants import CORS_ORIGINS, IPADDR_EXCLUDE, LOG_LEVEL, LOG_FILE
from logging_config import get_logger, setup_logging

setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)


def create_app(address_source: AddressSource = host_addresses, ipaddr_exclude=IPADDR_EXCLUDE) -> FastAPI:
    """Build the relay with its own room table; nothing is shared between apps."""
    app = FastAPI(title="WebRTC signaling relay")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    room_table = RoomTable()
    registry = ConnectionRegistry(room_table)
    app.state.room_table = room_table
    app.state.registry = registry
    app.state.coordinator = SessionCoordinator(
        room_table,
        registry,
        address_source=address_source,
        ipaddr_exclude=ipaddr_exclude,
    )

    app.include_router(rooms_router)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        lifecycle = ConnectionLifecycle(websocket, app.state.registry, app.state.coordinator)
        await lifecycle.run()

    logger.info("FastAPI application initialized")
    return app


app = create_app()
