"""
Platform action execution.

Realizes abstract ActionIdentifiers as OS input. Every connection shares
one executor, and it runs at most one action at a time so actions from
different clients never interleave.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from config import DRY_RUN, PLATFORM
from gestures.models import ActionIdentifier

logger = logging.getLogger(__name__)


class PlatformActionExecutor(ABC):
    """Base class; subclasses implement the blocking `_perform`."""

    name = "base"

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.executed_count = 0
        self.failed_count = 0

    @abstractmethod
    def supports(self, action: ActionIdentifier) -> bool:
        ...

    @abstractmethod
    def _perform(self, action: ActionIdentifier) -> None:
        """Run the OS effect. Raise on failure."""

    async def execute(self, action: ActionIdentifier) -> bool:
        """Perform `action`. Returns False on failure instead of raising."""
        if not self.supports(action):
            logger.debug(f"Action {action.value} is not available on {self.name}")
            return False

        async with self._lock:
            try:
                await asyncio.to_thread(self._perform, action)
            except Exception as e:
                self.failed_count += 1
                logger.warning(f"Action {action.value} failed: {e}")
                return False

        self.executed_count += 1
        return True


class LoggingActionExecutor(PlatformActionExecutor):
    """Records actions without touching the OS; used for dry runs."""

    name = "dry-run"

    def __init__(self) -> None:
        super().__init__()
        self.history: list[ActionIdentifier] = []

    def supports(self, action: ActionIdentifier) -> bool:
        return True

    def _perform(self, action: ActionIdentifier) -> None:
        logger.info(f"[dry-run] {action.value}")
        self.history.append(action)


def create_executor(platform: str = PLATFORM, dry_run: bool = DRY_RUN) -> PlatformActionExecutor:
    """Pick the executor for the host OS."""
    if dry_run:
        return LoggingActionExecutor()

    if platform == "darwin":
        from actions.macos import MacOSActionExecutor
        return MacOSActionExecutor()

    if platform in ("windows", "linux"):
        try:
            from actions.desktop import DesktopActionExecutor
            return DesktopActionExecutor(platform=platform)
        except ImportError as e:
            # pynput needs a display server on Linux
            logger.warning(f"Input backend unavailable ({e}), actions will only be logged")
            return LoggingActionExecutor()

    logger.warning(f"No input backend for platform '{platform}', actions will only be logged")
    return LoggingActionExecutor()
