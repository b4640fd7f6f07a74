"""
Trackpad Host: FastAPI application entry point.

Starts the discovery beacon and the gesture server on startup,
serves a local status API and an event WebSocket.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket

from actions.executor import create_executor
from api.routes import init_routes, router
from api.websocket import EventFeed
from config import API_HOST, API_PORT, DEVICE_NAME, DISCOVERY_PORT, TCP_PORT
from discovery.identity import resolve_host_identity
from discovery.service import DiscoveryBeacon
from gestures.server import GestureServer

# --- Logging ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# --- Service singletons ---
host_identity = resolve_host_identity(DEVICE_NAME)
executor = create_executor()
gesture_server = GestureServer(executor=executor, port=TCP_PORT)
discovery_beacon = DiscoveryBeacon(host_identity, tcp_port=TCP_PORT, broadcast_port=DISCOVERY_PORT)
event_feed = EventFeed()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start/stop background services."""
    logger.info("Starting Trackpad Host services...")

    try:
        # Wire up event broadcasting
        gesture_server.on_event(event_feed.handle_event)

        await gesture_server.start()
        await discovery_beacon.start()

        if host_identity.is_loopback_fallback:
            logger.warning("No usable network interface, clients will not discover this host")

        logger.info(
            f"Trackpad Host ready: "
            f"API: {API_HOST}:{API_PORT}, "
            f"Gestures: TCP {gesture_server.port}, "
            f"Discovery: UDP {DISCOVERY_PORT}, "
            f"Executor: {executor.name}"
        )

        yield

    except Exception as e:
        logger.error(f"Startup failed: {e}", exc_info=True)
        raise
    finally:
        # Shutdown
        logger.info("Shutting down Trackpad Host services...")
        await gesture_server.stop()
        await discovery_beacon.stop()


# --- FastAPI app ---
app = FastAPI(
    title="Trackpad Host",
    version="1.0.0",
    lifespan=lifespan,
)

# Inject services into routes
init_routes(discovery_beacon, gesture_server, executor)
app.include_router(router)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, connection_id: str | None = None):
    await event_feed.serve(websocket, connection_id=connection_id)


def main() -> None:
    import uvicorn

    uvicorn.run(
        app,
        host=API_HOST,
        port=API_PORT,
        log_level="info",
    )


if __name__ == "__main__":
    main()
