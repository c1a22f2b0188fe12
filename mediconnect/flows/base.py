"""
Base Flow class for MediConnect.

Flows hold the state behind one screen (booking wizard, health
dashboard, catalog page) and expose the operations the screen calls.
"""

from typing import List, Optional, Set

from loguru import logger

from mediconnect.config import get_settings


class BaseFlow:
    """
    Base flow class with common state and utilities.

    Provides:
    - Validation / failure messages (`errors`) and user notices (`notifications`)
    - Per-action busy flags so a handler cannot be re-entered while its
      previous call is still awaiting the backend
    - A closed flag: results arriving after `close()` are not applied
    - Common logging utilities
    """

    def __init__(self):
        self.settings = get_settings()
        self.errors: List[str] = []
        self.notifications: List[str] = []
        self._busy: Set[str] = set()
        self._closed = False

    @property
    def is_busy(self) -> bool:
        """Whether any action is awaiting the backend."""
        return bool(self._busy)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Detach the flow; pending calls finish but no longer update state."""
        self._closed = True
        self.log_action("closed")

    def _begin(self, action: str) -> bool:
        if action in self._busy:
            self.log_action(f"{action}_ignored", {"reason": "already in progress"})
            return False
        self._busy.add(action)
        return True

    def _end(self, action: str) -> None:
        self._busy.discard(action)

    def fail(self, message: str) -> bool:
        """Record a user-facing failure message. Always returns False."""
        self.errors.append(message)
        self.log_action("failed", {"error": message})
        return False

    def notify(self, message: str) -> None:
        self.notifications.append(message)

    def clear_errors(self) -> None:
        self.errors.clear()

    def log_action(self, action: str, details: Optional[dict] = None) -> None:
        """Log flow actions for monitoring and debugging."""
        extra = {"flow": self.__class__.__name__, "action": action}
        if details:
            extra.update(details)
        logger.info(f"{self.__class__.__name__}: {action}", extra=extra)
