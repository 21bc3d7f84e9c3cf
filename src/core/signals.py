"""Session signal channel.

Observers subscribe to session events (today only `SessionExpired`) and
are called synchronously when the gateway emits one. The gateway does not
know who listens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionExpired:
    endpoint: str
    reason: str = "session_expired"
    should_redirect: bool = True


SessionListener = Callable[[SessionExpired], None]


class SessionSignals:
    def __init__(self) -> None:
        self._listeners: List[SessionListener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register `listener` and return a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def emit(self, event: SessionExpired) -> None:
        # Snapshot so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Session listener failed for %s", event.reason)
