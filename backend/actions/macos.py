"""macOS actions through System Events AppleScript."""

import logging
import subprocess

from actions.executor import PlatformActionExecutor
from config import ACTION_TIMEOUT
from gestures.models import ActionIdentifier

logger = logging.getLogger(__name__)

_SYSTEM_EVENTS = 'tell application "System Events" to '

# Key codes: 123 left, 124 right, 125 down, 126 up, 48 tab, 53 escape
APPLESCRIPTS: dict[ActionIdentifier, str] = {
    ActionIdentifier.DESKTOP_PREVIOUS: _SYSTEM_EVENTS + "key code 123 using {control down, command down}",
    ActionIdentifier.DESKTOP_NEXT: _SYSTEM_EVENTS + "key code 124 using {control down, command down}",
    ActionIdentifier.SCROLL_RIGHT: _SYSTEM_EVENTS + "key code 124",
    ActionIdentifier.SCROLL_LEFT: _SYSTEM_EVENTS + "key code 123",
    ActionIdentifier.SCROLL_DOWN: _SYSTEM_EVENTS + "key code 125",
    ActionIdentifier.SCROLL_UP: _SYSTEM_EVENTS + "key code 126",
    ActionIdentifier.ZOOM_IN: _SYSTEM_EVENTS + 'keystroke "+" using {command down}',
    ActionIdentifier.ZOOM_OUT: _SYSTEM_EVENTS + 'keystroke "-" using {command down}',
    ActionIdentifier.OVERVIEW_OPEN: _SYSTEM_EVENTS + "key code 48 using {control down, command down}",
    ActionIdentifier.OVERVIEW_CLOSE: _SYSTEM_EVENTS + "key code 53",
}


class MacOSActionExecutor(PlatformActionExecutor):
    name = "macos"

    def __init__(self, timeout: float = ACTION_TIMEOUT) -> None:
        super().__init__()
        self._timeout = timeout

    def supports(self, action: ActionIdentifier) -> bool:
        return action in APPLESCRIPTS

    def _perform(self, action: ActionIdentifier) -> None:
        result = subprocess.run(
            ["osascript", "-e", APPLESCRIPTS[action]],
            capture_output=True,
            text=True,
            timeout=self._timeout,
        )
        if result.returncode != 0:
            raise RuntimeError(
                f"osascript exited with {result.returncode}: {result.stderr.strip()}"
            )
