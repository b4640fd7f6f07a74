"""Read-only REST API for the trackpad host."""

import logging

from fastapi import APIRouter

from config import DISCOVERY_PORT, PLATFORM

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# These will be injected by main.py at startup
_beacon = None
_gesture_server = None
_executor = None


def init_routes(beacon, gesture_server, executor) -> None:
    """Inject service dependencies into the routes module."""
    global _beacon, _gesture_server, _executor
    _beacon = beacon
    _gesture_server = gesture_server
    _executor = executor


@router.get("/status")
async def get_status():
    """Return what this host advertises and how busy it is."""
    return {
        "announcement": _beacon.announcement.model_dump(),
        "discovery_port": DISCOVERY_PORT,
        "discovery_interval": _beacon.interval,
        "tcp_port": _gesture_server.port,
        "platform": PLATFORM,
        "executor": _executor.name,
        "active_connections": len(_gesture_server.connections()),
        "max_connections": _gesture_server.max_connections,
    }


@router.get("/connections")
async def list_connections():
    """Return the currently connected trackpad clients."""
    return {
        "connections": [c.model_dump() for c in _gesture_server.connections()]
    }
