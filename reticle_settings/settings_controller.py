"""Orchestrates field bindings, profiles and import/export for the settings window."""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterable, Optional, Protocol

from reticle_settings.defaults import DEFAULT_LAYERS
from reticle_settings.field_binder import FieldAdapter, FieldBinder, FieldSet
from reticle_settings.profile_manager import (
    ErrorReporter,
    LabelPrompt,
    ProfileManager,
    ProfileSelector,
)
from reticle_store.settings_store import SettingsStore

_LOGGER = logging.getLogger("ReticleOverlay.Settings")


class TransferField(Protocol):
    """Text area used to hand settings JSON to and from the user."""

    def text(self) -> str: ...
    def set_text(self, text: str) -> None: ...
    def select_all(self) -> None: ...


class HotkeyRegistry(Protocol):
    def register_hotkey(self, name: str, callback: Callable[[str], None]) -> None: ...


class SettingsController:
    """Keeps form fields and the settings store consistent in both directions.

    Field edits are the only path that writes to the store. Store changes are
    applied back to fields with change events suppressed, so an update that
    came from the store never writes itself back.
    """

    def __init__(
        self,
        store: SettingsStore,
        fields: FieldSet,
        selector: ProfileSelector,
        *,
        report_error: ErrorReporter,
        prompt_label: Optional[LabelPrompt] = None,
        transfer: Optional[TransferField] = None,
        set_controls_enabled: Optional[Callable[[bool], None]] = None,
        quick_slot_fields: Iterable[FieldAdapter] = (),
        hotkeys: Optional[HotkeyRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._fields = fields
        self._quick_slot_fields = FieldSet(quick_slot_fields)
        self._transfer = transfer
        self._hotkeys = hotkeys
        self._report_error = report_error
        self._logger = logger or _LOGGER
        self.binder = FieldBinder(store, logger=self._logger)
        self.profiles = ProfileManager(
            store,
            self.binder,
            fields,
            selector,
            report_error=report_error,
            prompt_label=prompt_label,
            set_controls_enabled=set_controls_enabled,
            logger=self._logger,
        )
        self._dispose_subscription: Optional[Callable[[], None]] = None

    # Lifecycle ---------------------------------------------------------------

    def initialize(self) -> None:
        for field in self._quick_slot_fields:
            self.binder.set_field(field, None, True)
            field.on_change(self._field_change_callback(field))
            if self._hotkeys is not None:
                self._hotkeys.register_hotkey(field.key, self.on_quick_slot)

        self._dispose_subscription = self._store.subscribe(self.on_storage_changed)

        for field in self._fields:
            self.binder.set_field(field, None, True)
            field.on_change(self._field_change_callback(field))
        self.profiles.update_profiles()
        self._logger.debug(
            "Settings controller initialised: fields=%d quick_slots=%d",
            len(self._fields),
            len(self._quick_slot_fields),
        )

    def shutdown(self) -> None:
        dispose = self._dispose_subscription
        self._dispose_subscription = None
        if dispose is not None:
            dispose()

    # Change propagation ------------------------------------------------------

    def find_field(self, key: str) -> Optional[FieldAdapter]:
        return self._fields.get(key) or self._quick_slot_fields.get(key)

    def on_change(self, field: FieldAdapter) -> None:
        self._logger.debug("Changed: %s", field.key)
        self._store.set(field.key, self.binder.get_field(field))

    def on_storage_changed(self, key: str, new_value: Any, old_value: Any) -> None:
        self._logger.debug("Storage changed: %s = %r", key, new_value)
        field = self.find_field(key)
        if field is not None:
            # The value is already in the store; applying it must not write it back.
            self.binder.set_field(field, None, True)

    def _field_change_callback(self, field: FieldAdapter) -> Callable[[], None]:
        def _on_change() -> None:
            self.on_change(field)

        return _on_change

    # Import / export ---------------------------------------------------------

    def export_settings(self) -> str:
        text = json.dumps(self.profiles.retrieve(), indent=2)
        if self._transfer is not None:
            self._transfer.set_text(text)
            self._transfer.select_all()
        return text

    def import_settings(self, text: Optional[str] = None) -> bool:
        if text is None:
            text = self._transfer.text() if self._transfer is not None else ""
        data = None
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as exc:
            self._logger.debug("Import text failed to parse: %s", exc)
        if not isinstance(data, dict):
            self._error("ERROR: Provided data is not valid JSON for an Object.")
            return False
        self.profiles.apply(data)
        self._logger.info("Imported %d setting(s)", len(data))
        return True

    def reset_to_defaults(self) -> None:
        for layer in DEFAULT_LAYERS:
            self.profiles.apply(layer)

    # Profiles ----------------------------------------------------------------

    def on_quick_slot(self, name: str) -> bool:
        return self.profiles.on_quick_slot(name)

    def save(self) -> bool:
        return self.profiles.save()

    def load(self) -> bool:
        return self.profiles.load()

    def create(self) -> bool:
        return self.profiles.create_prompted()

    def remove(self) -> bool:
        return self.profiles.remove_selected()

    def _error(self, message: str) -> None:
        self._logger.warning(message)
        try:
            self._report_error(message)
        except Exception as exc:
            self._logger.warning("Error reporter failed: %s", exc, exc_info=exc)
