"""Binds form inputs to settings store keys.

Inputs are reached through the toolkit-free ``FieldAdapter`` protocol so the
binding rules can be exercised without a running Qt application; the Qt
adapters live in ``reticle_settings.qt_fields``.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Union

from reticle_store.settings_store import SettingsStore

_LOGGER = logging.getLogger("ReticleOverlay.Settings")

FieldValue = Union[bool, str]
Snapshot = Mapping[str, Any]

_TRUE_TOKENS = {"1", "true", "yes", "on"}


class FieldAdapter(Protocol):
    """One form input addressed by its identifier."""

    key: str
    is_toggle: bool

    def read(self) -> Any: ...
    def write(self, value: FieldValue, *, notify: bool) -> None: ...
    def on_change(self, callback: Callable[[], None]) -> None: ...


def coerce_field_value(field: FieldAdapter, raw: Any) -> FieldValue:
    """Convert ``raw`` into the representation ``field`` stores."""
    if field.is_toggle:
        if isinstance(raw, str):
            return raw.strip().lower() in _TRUE_TOKENS
        return bool(raw)
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if raw is None:
        return ""
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


def get_field(field: FieldAdapter) -> FieldValue:
    return coerce_field_value(field, field.read())


class FieldSet:
    """Ordered collection of bound fields keyed by identifier."""

    def __init__(self, fields: Iterable[FieldAdapter] = ()) -> None:
        self._fields: Dict[str, FieldAdapter] = {}
        for field in fields:
            self.add(field)

    def add(self, field: FieldAdapter) -> None:
        if not field.key:
            return
        self._fields[field.key] = field

    def get(self, key: str) -> Optional[FieldAdapter]:
        return self._fields.get(key)

    def keys(self) -> List[str]:
        return list(self._fields.keys())

    def __iter__(self) -> Iterator[FieldAdapter]:
        return iter(list(self._fields.values()))

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, key: object) -> bool:
        return key in self._fields


class FieldBinder:
    """Applies snapshot or stored values to fields."""

    def __init__(self, store: SettingsStore, *, logger: Optional[logging.Logger] = None) -> None:
        self._store = store
        self._logger = logger or _LOGGER

    def resolve_value(self, key: str, snapshot: Optional[Snapshot] = None) -> Optional[Any]:
        """Snapshot value first, then the stored value, else ``None``."""
        if snapshot is not None:
            candidate = snapshot.get(key)
            if candidate is not None:
                return candidate
        return self._store.get(key)

    def set_field(
        self,
        field: FieldAdapter,
        snapshot: Optional[Snapshot] = None,
        suppress_change_event: bool = False,
    ) -> bool:
        """Apply the resolved value to ``field``; returns True when its value changed."""
        key = field.key
        if not key:
            return False
        value = self.resolve_value(key, snapshot)
        if value is None:
            return False
        return self.apply_value(field, value, suppress_change_event)

    def apply_value(self, field: FieldAdapter, value: Any, suppress_change_event: bool = False) -> bool:
        coerced = coerce_field_value(field, value)
        before = get_field(field)
        field.write(coerced, notify=not suppress_change_event)
        changed = get_field(field) != before
        if changed:
            self._logger.debug(
                "Field %s set to %r (suppressed=%s)", field.key, coerced, suppress_change_event
            )
        return changed

    def get_field(self, field: FieldAdapter) -> FieldValue:
        return get_field(field)
