"""
Windows and Linux actions through pynput keyboard/mouse simulation.

Hotkeys are written as key names: single characters are typed as-is,
longer names are looked up on pynput's `Key` (cmd is the Windows/Super key).
"""

import logging

from actions.executor import PlatformActionExecutor
from gestures.models import ActionIdentifier

logger = logging.getLogger(__name__)

_SCROLLS: dict[ActionIdentifier, tuple[int, int]] = {
    ActionIdentifier.SCROLL_RIGHT: (1, 0),
    ActionIdentifier.SCROLL_LEFT: (-1, 0),
    ActionIdentifier.SCROLL_DOWN: (0, -1),
    ActionIdentifier.SCROLL_UP: (0, 1),
}

HOTKEYS: dict[str, dict[ActionIdentifier, tuple[str, ...]]] = {
    "windows": {
        ActionIdentifier.DESKTOP_PREVIOUS: ("cmd", "ctrl", "left"),
        ActionIdentifier.DESKTOP_NEXT: ("cmd", "ctrl", "right"),
        ActionIdentifier.ZOOM_IN: ("ctrl", "="),
        ActionIdentifier.ZOOM_OUT: ("ctrl", "-"),
        ActionIdentifier.OVERVIEW_OPEN: ("cmd", "tab"),
        ActionIdentifier.OVERVIEW_CLOSE: ("esc",),
    },
    # GNOME/KDE default workspace bindings
    "linux": {
        ActionIdentifier.DESKTOP_PREVIOUS: ("ctrl", "alt", "left"),
        ActionIdentifier.DESKTOP_NEXT: ("ctrl", "alt", "right"),
        ActionIdentifier.ZOOM_IN: ("ctrl", "="),
        ActionIdentifier.ZOOM_OUT: ("ctrl", "-"),
        ActionIdentifier.OVERVIEW_OPEN: ("cmd",),
        ActionIdentifier.OVERVIEW_CLOSE: ("esc",),
    },
}


class DesktopActionExecutor(PlatformActionExecutor):
    """pynput-backed executor; controllers can be injected for tests."""

    name = "pynput"

    def __init__(self, platform: str = "windows", keyboard=None, mouse=None, keys=None):
        super().__init__()
        if platform not in HOTKEYS:
            raise ValueError(f"Unsupported platform for pynput backend: {platform}")
        self._hotkeys = HOTKEYS[platform]
        self.name = f"pynput-{platform}"

        if keyboard is None or mouse is None or keys is None:
            # pynput picks its backend at import time and needs a display on Linux
            from pynput.keyboard import Controller as KeyboardController, Key
            from pynput.mouse import Controller as MouseController

            keyboard = keyboard or KeyboardController()
            mouse = mouse or MouseController()
            keys = keys or Key

        self._keyboard = keyboard
        self._mouse = mouse
        self._keys = keys

    def supports(self, action: ActionIdentifier) -> bool:
        return action in self._hotkeys or action in _SCROLLS

    def _resolve(self, name: str):
        if len(name) == 1:
            return name
        return getattr(self._keys, name)

    def _perform(self, action: ActionIdentifier) -> None:
        if action in _SCROLLS:
            dx, dy = _SCROLLS[action]
            self._mouse.scroll(dx, dy)
            return

        *modifiers, key = [self._resolve(k) for k in self._hotkeys[action]]
        pressed = []
        try:
            for mod in modifiers:
                self._keyboard.press(mod)
                pressed.append(mod)
            self._keyboard.press(key)
            self._keyboard.release(key)
        finally:
            for mod in reversed(pressed):
                self._keyboard.release(mod)
