"""Pause gate for namespace-bundle ownership notifications."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
import threading
from typing import Callable, Iterator

from .logging_config import StructuredLogger
from .types import NamespaceBundle

logger = StructuredLogger("ownership")


class PauseState(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"


class OwnershipPauseGate:
    """Wraps a bundle-owned handler so it can be switched off and on.

    ``pause()``, ``resume()`` and :meth:`on_namespace_bundle_owned` all take the
    same lock. While paused, ownership events are dropped rather than queued,
    and ``resume()`` does not replay them; ``dropped_events`` counts how many
    were lost. While active, the handler runs with the lock held, so a
    ``pause()`` issued mid-handling only takes effect once that handling ends.
    """

    def __init__(self, on_bundle_owned: Callable[[NamespaceBundle], None]):
        self._on_bundle_owned = on_bundle_owned
        self._lock = threading.Lock()
        self._state = PauseState.ACTIVE
        self._dropped = 0

    @property
    def state(self) -> PauseState:
        # single attribute read, safe without the lock
        return self._state

    @property
    def is_paused(self) -> bool:
        return self._state is PauseState.PAUSED

    @property
    def dropped_events(self) -> int:
        return self._dropped

    def pause(self) -> None:
        with self._lock:
            if self._state is PauseState.PAUSED:
                return
            self._state = PauseState.PAUSED
        logger.info("Bundle ownership handling paused")

    def resume(self) -> None:
        with self._lock:
            if self._state is PauseState.ACTIVE:
                return
            self._state = PauseState.ACTIVE
            dropped = self._dropped
        logger.info("Bundle ownership handling resumed", dropped_events=dropped)

    @contextmanager
    def paused(self) -> Iterator["OwnershipPauseGate"]:
        self.pause()
        try:
            yield self
        finally:
            self.resume()

    def on_namespace_bundle_owned(self, bundle: NamespaceBundle) -> None:
        with self._lock:
            if self._state is PauseState.ACTIVE:
                self._on_bundle_owned(bundle)
                return
            self._dropped += 1
        logger.debug("Dropped bundle ownership event while paused", bundle=str(bundle))
