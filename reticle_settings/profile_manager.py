"""Named profiles and quick slots layered on the settings store."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from reticle_settings.field_binder import FieldBinder, FieldSet, Snapshot
from reticle_store.settings_store import SettingsStore

_LOGGER = logging.getLogger("ReticleOverlay.Settings")

PROFILE_PREFIX = "saved_"
QUICK_SLOT_PREFIX = "quickSlot"
QUICK_SLOT_COUNT = 10

ErrorReporter = Callable[[str], None]
LabelPrompt = Callable[[str], Optional[str]]


class ProfileSelector(Protocol):
    """Ordered, de-duplicated list of profile labels with a current selection."""

    def set_options(self, labels: List[str]) -> None: ...
    def current(self) -> str: ...
    def select(self, label: str) -> None: ...


def quick_slot_names() -> List[str]:
    return [f"{QUICK_SLOT_PREFIX}{index}" for index in range(1, QUICK_SLOT_COUNT + 1)]


def profile_key(label: str) -> str:
    return f"{PROFILE_PREFIX}{label}"


class ProfileManager:
    """Saves, loads and lists whole-form snapshots under ``saved_<label>``."""

    def __init__(
        self,
        store: SettingsStore,
        binder: FieldBinder,
        fields: FieldSet,
        selector: ProfileSelector,
        *,
        report_error: ErrorReporter,
        prompt_label: Optional[LabelPrompt] = None,
        set_controls_enabled: Optional[Callable[[bool], None]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._binder = binder
        self._fields = fields
        self._selector = selector
        self._report_error = report_error
        self._prompt_label = prompt_label
        self._set_controls_enabled = set_controls_enabled
        self._logger = logger or _LOGGER

    # Snapshots -------------------------------------------------------------

    def retrieve(self) -> Dict[str, Any]:
        return {field.key: self._binder.get_field(field) for field in self._fields}

    def apply(self, snapshot: Optional[Snapshot], suppress_change_event: bool = False) -> None:
        for field in self._fields:
            self._binder.set_field(field, snapshot, suppress_change_event)

    # Profiles --------------------------------------------------------------

    def save_data(self, label: Optional[str]) -> bool:
        label = label or ""
        if label == "":
            self._error(f"ERROR: invalid label - {label}")
            return False
        self._store.set(profile_key(label), self.retrieve())
        self._logger.info("Saved profile '%s'", label)
        return True

    def load_data(self, label: Optional[str]) -> bool:
        label = label or ""
        if label != "":
            data = self._store.get(profile_key(label))
            if isinstance(data, dict):
                self.apply(data)
                self._logger.info("Loaded profile '%s'", label)
                return True
        self._error(f"ERROR: no data found under label - {label}")
        return False

    def profile_labels(self) -> List[str]:
        labels = {
            key[len(PROFILE_PREFIX):]
            for key in self._store.keys()
            if key.startswith(PROFILE_PREFIX)
        }
        return sorted(labels)

    def update_profiles(self) -> List[str]:
        selected = self._selector.current()
        labels = self.profile_labels()
        self._selector.set_options(labels)
        if labels:
            if selected not in labels:
                selected = labels[0]
            self._controls_enabled(True)
        else:
            selected = ""
            self._controls_enabled(False)
        self._selector.select(selected)
        return labels

    def create(self, label: Optional[str]) -> bool:
        if not label:
            return False
        if not self.save_data(label):
            return False
        self.update_profiles()
        self._selector.select(label)
        return True

    def remove(self, label: Optional[str]) -> bool:
        if not label:
            return False
        self._store.remove(profile_key(label))
        self._logger.info("Removed profile '%s'", label)
        self.update_profiles()
        return True

    # Selector-driven entry points -------------------------------------------

    def save(self) -> bool:
        return self.save_data(self._selector.current())

    def load(self) -> bool:
        return self.load_data(self._selector.current())

    def create_prompted(self) -> bool:
        if self._prompt_label is None:
            return False
        return self.create(self._prompt_label("Enter a profile name."))

    def remove_selected(self) -> bool:
        return self.remove(self._selector.current())

    # Quick slots -----------------------------------------------------------

    def on_quick_slot(self, slot_name: str) -> bool:
        label = self._store.get(slot_name)
        if not isinstance(label, str) or label == "":
            self._logger.debug("Quick slot %s is empty", slot_name)
            return False
        if not self.load_data(label):
            return False
        self._selector.select(label)
        return True

    # Helpers ----------------------------------------------------------------

    def _controls_enabled(self, enabled: bool) -> None:
        if self._set_controls_enabled is not None:
            self._set_controls_enabled(enabled)

    def _error(self, message: str) -> None:
        self._logger.warning(message)
        try:
            self._report_error(message)
        except Exception as exc:
            self._logger.warning("Error reporter failed: %s", exc, exc_info=exc)
