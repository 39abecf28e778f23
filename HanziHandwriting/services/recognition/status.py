"""Status channel from the recognition engine to UI listeners."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

LOADING = 'loading'
ANALYZING = 'analyzing'
READY = 'ready'
FALLBACK = 'fallback'
ERROR_PREFIX = 'error: '

StatusObserver = Callable[[str], None]


def error_status(message: str) -> str:
    return f"{ERROR_PREFIX}{message}"


def is_idle(status: str) -> bool:
    """True once the engine has finished every phase (UI re-enables its trigger).

    Error and fallback notices arrive mid-request, before the closing `ready`.
    """
    return status == READY


class StatusChannel:
    """Publish human-readable phase strings to observers.

    `set_observer` keeps exactly one primary observer (a later call replaces
    the former); `subscribe` adds any number of extra listeners.
    """

    def __init__(self) -> None:
        self._primary: Optional[StatusObserver] = None
        self._subscribers: List[StatusObserver] = []
        self.last: Optional[str] = None

    def set_observer(self, callback: Optional[StatusObserver]) -> None:
        self._primary = callback

    def subscribe(self, callback: StatusObserver) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, status: str) -> None:
        self.last = status
        observers = ([self._primary] if self._primary is not None else []) + list(self._subscribers)
        for cb in observers:
            try:
                cb(status)
            except Exception:
                # a broken listener must not break recognition
                logger.exception('Status observer failed for status %r', status)
