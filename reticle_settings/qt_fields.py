"""PyQt6 adapters for form inputs, the profile selector, transfer box and hotkeys."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from PyQt6.QtCore import QObject, QRegularExpression, QSignalBlocker, Qt
from PyQt6.QtGui import QKeySequence, QRegularExpressionValidator, QShortcut
from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QLineEdit,
    QPlainTextEdit,
    QWidget,
)

from reticle_settings.field_binder import FieldValue
from reticle_settings.profile_manager import QUICK_SLOT_PREFIX

_LOGGER = logging.getLogger("ReticleOverlay.Settings")

_NUMBER_PATTERN = QRegularExpression(r"^[+-]?(\d+(\.\d*)?|\.\d+)?$")


class _SignalsBlocked:
    def __init__(self, obj: QObject) -> None:
        self._obj = obj
        self._blocker: QSignalBlocker | None = None

    def __enter__(self) -> "_SignalsBlocked":
        self._blocker = QSignalBlocker(self._obj)
        return self

    def __exit__(self, *_exc: object) -> None:
        if self._blocker is not None:
            self._blocker.unblock()
            self._blocker = None


class QtFieldAdapter:
    """Base adapter: programmatic writes never emit the widget's own signals.

    With ``notify=True`` a write that changes the value calls the registered
    change callbacks, as a user edit would.
    """

    is_toggle = False

    def __init__(self, key: str, widget: QWidget) -> None:
        self.key = key
        self.widget = widget
        self._callbacks: List[Callable[[], None]] = []
        widget.setObjectName(key)
        self._connect_user_signal()

    def read(self) -> Any:
        raise NotImplementedError

    def _write_native(self, value: FieldValue) -> None:
        raise NotImplementedError

    def _connect_user_signal(self) -> None:
        raise NotImplementedError

    def write(self, value: FieldValue, *, notify: bool) -> None:
        before = self.read()
        with _SignalsBlocked(self.widget):
            self._write_native(value)
        if notify and self.read() != before:
            self._fire()

    def on_change(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def _fire(self, *_args: object) -> None:
        for callback in list(self._callbacks):
            callback()


class CheckBoxField(QtFieldAdapter):
    is_toggle = True
    widget: QCheckBox

    def read(self) -> bool:
        return self.widget.isChecked()

    def _write_native(self, value: FieldValue) -> None:
        self.widget.setChecked(bool(value))

    def _connect_user_signal(self) -> None:
        self.widget.clicked.connect(self._fire)


class LineEditField(QtFieldAdapter):
    widget: QLineEdit

    def read(self) -> str:
        return self.widget.text()

    def _write_native(self, value: FieldValue) -> None:
        self.widget.setText(str(value))

    def _connect_user_signal(self) -> None:
        self.widget.editingFinished.connect(self._fire)


class ComboBoxField(QtFieldAdapter):
    widget: QComboBox

    def read(self) -> str:
        return self.widget.currentText()

    def _write_native(self, value: FieldValue) -> None:
        text = str(value)
        index = self.widget.findText(text)
        if index >= 0:
            self.widget.setCurrentIndex(index)
        elif self.widget.isEditable():
            self.widget.setEditText(text)
        else:
            _LOGGER.debug("Ignoring unknown option %r for %s", text, self.key)

    def _connect_user_signal(self) -> None:
        self.widget.activated.connect(self._fire)


class NumberField(LineEditField):
    """Line edit restricted to numeric input while the user types.

    Programmatic writes bypass the validator, so stored values (negative,
    fractional or out of any usual range) are shown and kept verbatim.
    """

    def __init__(self, key: str, widget: QLineEdit) -> None:
        super().__init__(key, widget)
        widget.setValidator(QRegularExpressionValidator(_NUMBER_PATTERN, widget))


class TransferBox:
    """Import/export text area."""

    def __init__(self, widget: QPlainTextEdit) -> None:
        self.widget = widget

    def text(self) -> str:
        return self.widget.toPlainText()

    def set_text(self, text: str) -> None:
        self.widget.setPlainText(text)

    def select_all(self) -> None:
        self.widget.setFocus()
        self.widget.selectAll()


class ComboProfileSelector:
    """Profile selector backed by a QComboBox."""

    def __init__(self, widget: QComboBox) -> None:
        self.widget = widget

    def set_options(self, labels: List[str]) -> None:
        with _SignalsBlocked(self.widget):
            self.widget.clear()
            self.widget.addItems(list(dict.fromkeys(labels)))

    def current(self) -> str:
        return self.widget.currentText()

    def select(self, label: str) -> None:
        with _SignalsBlocked(self.widget):
            self.widget.setCurrentIndex(self.widget.findText(label) if label else -1)


def quick_slot_key_sequence(name: str) -> QKeySequence:
    index = int(name[len(QUICK_SLOT_PREFIX):])
    return QKeySequence(f"Ctrl+{index % 10}")


class ShortcutHotkeys:
    """Registers quick-slot hotkeys as application-wide shortcuts on ``parent``.

    ``ApplicationShortcut`` only fires while a window of this application has
    focus; these are not system-wide hotkeys. Pass another ``HotkeyRegistry``
    to ``SettingsWindow`` where a global hotkey facility is available.
    """

    def __init__(self, parent: QWidget, *, enabled: Optional[Callable[[], bool]] = None) -> None:
        self._parent = parent
        self._enabled = enabled
        self._shortcuts: Dict[str, QShortcut] = {}

    def register_hotkey(self, name: str, callback: Callable[[str], None]) -> None:
        shortcut = QShortcut(quick_slot_key_sequence(name), self._parent)
        shortcut.setContext(Qt.ShortcutContext.ApplicationShortcut)
        shortcut.activated.connect(lambda: self._activate(name, callback))
        self._shortcuts[name] = shortcut
        _LOGGER.debug("Registered hotkey %s for %s", shortcut.key().toString(), name)

    def _activate(self, name: str, callback: Callable[[str], None]) -> None:
        if self._enabled is not None and not self._enabled():
            _LOGGER.debug("Hotkey %s ignored; hotkeys disabled", name)
            return
        callback(name)
