"""Application-wide configuration constants."""

import os
import platform

# --- Identity ---
DEVICE_NAME = os.environ.get("TRACKPAD_DEVICE_NAME") or platform.node()
PLATFORM = platform.system().lower()  # "windows" | "darwin" | "linux"

# --- Networking ---
TCP_PORT = int(os.environ.get("TRACKPAD_TCP_PORT", "4567"))
DISCOVERY_PORT = int(os.environ.get("TRACKPAD_DISCOVERY_PORT", "4568"))  # UDP
DISCOVERY_INTERVAL = float(os.environ.get("TRACKPAD_DISCOVERY_INTERVAL", "2"))  # seconds
BROADCAST_ADDRESS = "255.255.255.255"

API_HOST = os.environ.get("TRACKPAD_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("TRACKPAD_API_PORT", "8765"))

# --- Gesture stream ---
READ_CHUNK_SIZE = 1024
MAX_LINE_LENGTH = 256
MAX_CONNECTIONS = int(os.environ.get("TRACKPAD_MAX_CONNECTIONS", "8"))
FRAMING_MODE = os.environ.get("TRACKPAD_FRAMING", "line")  # "line" | "legacy"

# --- Actions ---
DRY_RUN = os.environ.get("TRACKPAD_DRY_RUN", "0") == "1"
ACTION_TIMEOUT = 5  # seconds, per osascript invocation

# --- Event feed ---
EVENT_QUEUE_SIZE = 64  # events buffered per WebSocket subscriber
EVENT_SEND_TIMEOUT = 1.0  # seconds before a stalled subscriber is dropped
