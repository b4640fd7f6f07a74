"""Pydantic models and vocabulary for the gesture stream."""

from enum import Enum

from pydantic import BaseModel


class ActionIdentifier(str, Enum):
    """Platform-independent OS actions a gesture can trigger."""
    DESKTOP_PREVIOUS = "desktop-previous"
    DESKTOP_NEXT = "desktop-next"
    SCROLL_RIGHT = "scroll-right"
    SCROLL_LEFT = "scroll-left"
    SCROLL_DOWN = "scroll-down"
    SCROLL_UP = "scroll-up"
    ZOOM_IN = "zoom-in"
    ZOOM_OUT = "zoom-out"
    OVERVIEW_OPEN = "overview-open"
    OVERVIEW_CLOSE = "overview-close"


class GestureToken:
    SWIPE_RIGHT_DESKTOP = "swipe-right-desktop"
    SWIPE_LEFT_DESKTOP = "swipe-left-desktop"
    SCROLL_H_RIGHT = "scroll-h-right"
    SCROLL_H_LEFT = "scroll-h-left"
    SCROLL_V_DOWN = "scroll-v-down"
    SCROLL_V_UP = "scroll-v-up"
    ZOOM_IN = "zoom-in"
    ZOOM_OUT = "zoom-out"
    FIVE_FINGER_PINCH_OPEN = "five-finger-pinch-open"
    FIVE_FINGER_PINCH_CLOSE = "five-finger-pinch-close"


# Swiping right goes to the previous desktop, like a physical trackpad.
TOKEN_ACTIONS: dict[str, ActionIdentifier] = {
    GestureToken.SWIPE_RIGHT_DESKTOP: ActionIdentifier.DESKTOP_PREVIOUS,
    GestureToken.SWIPE_LEFT_DESKTOP: ActionIdentifier.DESKTOP_NEXT,
    GestureToken.SCROLL_H_RIGHT: ActionIdentifier.SCROLL_RIGHT,
    GestureToken.SCROLL_H_LEFT: ActionIdentifier.SCROLL_LEFT,
    GestureToken.SCROLL_V_DOWN: ActionIdentifier.SCROLL_DOWN,
    GestureToken.SCROLL_V_UP: ActionIdentifier.SCROLL_UP,
    GestureToken.ZOOM_IN: ActionIdentifier.ZOOM_IN,
    GestureToken.ZOOM_OUT: ActionIdentifier.ZOOM_OUT,
    GestureToken.FIVE_FINGER_PINCH_OPEN: ActionIdentifier.OVERVIEW_OPEN,
    GestureToken.FIVE_FINGER_PINCH_CLOSE: ActionIdentifier.OVERVIEW_CLOSE,
}

# Tokens sent by older clients, kept so they keep working unchanged.
LEGACY_TOKENS: dict[str, str] = {
    "\u27a1\ufe0f Cambio escritorio": GestureToken.SWIPE_RIGHT_DESKTOP,
    "\u2b05\ufe0f Cambio escritorio": GestureToken.SWIPE_LEFT_DESKTOP,
    "\u27a1\ufe0f Scroll H": GestureToken.SCROLL_H_RIGHT,
    "\u2b05\ufe0f Scroll H": GestureToken.SCROLL_H_LEFT,
    "\u2b07\ufe0f Scroll V": GestureToken.SCROLL_V_DOWN,
    "\u2b06\ufe0f Scroll V": GestureToken.SCROLL_V_UP,
    "\U0001f50d Zoom+": GestureToken.ZOOM_IN,
    "\U0001f50e Zoom-": GestureToken.ZOOM_OUT,
    "\U0001f590\ufe0f\U0001f50d Pinch+ de 5": GestureToken.FIVE_FINGER_PINCH_OPEN,
    "\U0001f590\ufe0f\U0001f50e Pinch- de 5": GestureToken.FIVE_FINGER_PINCH_CLOSE,
}


class ConnectionInfo(BaseModel):
    """State of one gesture-stream connection, exposed to the status API."""
    connection_id: str
    peer_address: str
    connected_at: float  # Unix timestamp
    tokens_received: int = 0
    actions_dispatched: int = 0
    active: bool = True
