"""Key/value settings store with a synchronous change broadcast."""
from __future__ import annotations

import copy
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional

from reticle_store.json_medium import StorageMedium

_LOGGER = logging.getLogger("ReticleOverlay.Store")

ChangeListener = Callable[[str, Any, Any], None]


class StoreWriteError(RuntimeError):
    """Raised when a write could not be made durable."""


@dataclass(frozen=True)
class ChangeEvent:
    key: str
    new_value: Any
    old_value: Any


class SettingsStore:
    """Wraps a storage medium and notifies subscribers of every write.

    Events are delivered synchronously after the medium accepted the write.
    A write issued from inside a listener is queued so every listener still
    sees events in write order.
    """

    def __init__(self, medium: StorageMedium, *, logger: Optional[logging.Logger] = None) -> None:
        self._medium = medium
        self._logger = logger or _LOGGER
        self._data: Dict[str, Any] = medium.read_all()
        self._stamp = medium.stamp()
        self._listeners: List[ChangeListener] = []
        self._pending: Deque[ChangeEvent] = deque()
        self._emitting = False

    # Reads ---------------------------------------------------------------

    def get(self, key: str) -> Any:
        value = self._data.get(key)
        if isinstance(value, (dict, list)):
            return copy.deepcopy(value)
        return value

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def key(self, index: int) -> Optional[str]:
        keys = self.keys()
        if 0 <= index < len(keys):
            return keys[index]
        return None

    def length(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    # Writes --------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        old_value = self._data.get(key)
        updated = dict(self._data)
        updated[key] = copy.deepcopy(value) if isinstance(value, (dict, list)) else value
        self._persist(updated, key)
        self._logger.debug("Stored %s = %r", key, value)
        self._emit(ChangeEvent(key, self.get(key), old_value))

    def remove(self, key: str) -> None:
        if key not in self._data:
            return
        updated = dict(self._data)
        old_value = updated.pop(key)
        self._persist(updated, key)
        self._logger.debug("Removed %s", key)
        self._emit(ChangeEvent(key, None, old_value))

    def reload(self) -> List[str]:
        """Pick up writes made to the medium by another store.

        Returns the keys whose value differs from the in-memory view; one
        change event is broadcast per key.
        """
        # Stamp first: a write landing after the read must still look pending.
        stamp = self._medium.stamp()
        fresh = self._medium.read_all()
        previous = self._data
        self._data = fresh
        self._stamp = stamp
        changed: List[str] = []
        for key, value in fresh.items():
            if key not in previous or previous[key] != value:
                changed.append(key)
        changed.extend(key for key in previous if key not in fresh)
        for key in changed:
            self._logger.debug("External change detected for %s", key)
            self._emit(ChangeEvent(key, self.get(key), previous.get(key)))
        return changed

    def needs_reload(self) -> bool:
        return self._medium.stamp() != self._stamp

    def _persist(self, updated: Dict[str, Any], key: str) -> None:
        try:
            self._medium.write_all(updated)
        except Exception as exc:
            self._logger.error("Failed to persist %s: %s", key, exc)
            raise StoreWriteError(f"Failed to persist '{key}'") from exc
        self._data = updated
        self._stamp = self._medium.stamp()

    # Subscriptions -------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _dispose() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _dispose

    def _emit(self, event: ChangeEvent) -> None:
        self._pending.append(event)
        if self._emitting:
            return
        self._emitting = True
        try:
            while self._pending:
                current = self._pending.popleft()
                for listener in list(self._listeners):
                    try:
                        listener(current.key, current.new_value, current.old_value)
                    except Exception as exc:
                        self._logger.warning(
                            "Change listener failed for %s: %s", current.key, exc, exc_info=exc
                        )
        finally:
            self._emitting = False
