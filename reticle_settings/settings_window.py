"""PyQt6 settings window: reticle form, profiles, quick slots and import/export."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QCheckBox,
    QColorDialog,
    QComboBox,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from reticle_settings.field_binder import FieldSet
from reticle_settings.profile_manager import quick_slot_names
from reticle_settings.qt_fields import (
    CheckBoxField,
    ComboProfileSelector,
    LineEditField,
    NumberField,
    QtFieldAdapter,
    ShortcutHotkeys,
    TransferBox,
)
from reticle_settings.settings_controller import HotkeyRegistry, SettingsController
from reticle_store.settings_store import SettingsStore

_LOGGER = logging.getLogger("ReticleOverlay.Settings")

# (key, label, kind) where kind is "check", "number" or "color".
FieldSpec = Tuple[str, str, str]

FORM_SECTIONS: Sequence[Tuple[str, Sequence[FieldSpec]]] = (
    (
        "Circle",
        (
            ("circleEnabled", "Show circle", "check"),
            ("circleRadius", "Radius", "number"),
            ("circleThickness", "Thickness", "number"),
            ("circleColor", "Color", "color"),
        ),
    ),
    (
        "Dot",
        (
            ("dotEnabled", "Show dot", "check"),
            ("dotRadius", "Radius", "number"),
            ("dotColor", "Color", "color"),
        ),
    ),
    (
        "Cross",
        (
            ("crossEnabled", "Show cross", "check"),
            ("crossLength", "Length", "number"),
            ("crossSpread", "Spread", "number"),
            ("crossThickness", "Thickness", "number"),
            ("crossColor", "Color", "color"),
            ("crossSpinPeriod", "Spin period (ms)", "number"),
        ),
    ),
    (
        "General",
        (
            ("startHidden", "Start hidden", "check"),
            ("hotkeysEnabled", "Quick slot hotkeys", "check"),
        ),
    ),
    (
        "Window",
        (
            ("overlayOpacity", "Opacity (%)", "number"),
            ("clickThrough", "Click-through", "check"),
        ),
    ),
)


class SettingsWindow(QWidget):
    """Form whose inputs are kept in sync with the settings store."""

    def __init__(
        self,
        store: SettingsStore,
        *,
        hotkeys: Optional[HotkeyRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self._store = store
        self._logger = logger or _LOGGER
        self.setWindowTitle("Reticle Settings")
        self.fields = FieldSet()
        self._adapters: Dict[str, QtFieldAdapter] = {}

        root = QVBoxLayout(self)
        root.addWidget(self._build_profile_row())
        for title, specs in FORM_SECTIONS:
            root.addWidget(self._build_section(title, specs))
        quick_slots = self._build_quick_slots()
        root.addWidget(quick_slots[0])
        root.addWidget(self._build_transfer())
        root.addLayout(self._build_footer())

        if hotkeys is None:
            hotkeys = ShortcutHotkeys(self, enabled=self._hotkeys_enabled)
        self.controller = SettingsController(
            store,
            self.fields,
            ComboProfileSelector(self.profile_combo),
            report_error=self.show_error,
            prompt_label=self.prompt_label,
            transfer=TransferBox(self.transfer_edit),
            set_controls_enabled=self.set_profile_controls_enabled,
            quick_slot_fields=quick_slots[1],
            hotkeys=hotkeys,
            logger=self._logger,
        )
        self._connect_buttons()

    # Construction ----------------------------------------------------------

    def _build_profile_row(self) -> QWidget:
        box = QGroupBox("Profile", self)
        row = QHBoxLayout(box)
        self.profile_combo = QComboBox(box)
        self.profile_combo.setObjectName("profileName")
        self.load_button = QPushButton("Load", box)
        self.save_button = QPushButton("Save", box)
        self.new_button = QPushButton("New…", box)
        self.delete_button = QPushButton("Delete", box)
        row.addWidget(self.profile_combo, 1)
        for button in (self.load_button, self.save_button, self.new_button, self.delete_button):
            row.addWidget(button)
        return box

    def _build_section(self, title: str, specs: Sequence[FieldSpec]) -> QWidget:
        box = QGroupBox(title, self)
        form = QFormLayout(box)
        for key, label, kind in specs:
            adapter, widget = self._build_field(box, key, label, kind)
            self._adapters[key] = adapter
            self.fields.add(adapter)
            form.addRow("" if kind == "check" else label, widget)
        return box

    def _build_field(
        self,
        parent: QWidget,
        key: str,
        label: str,
        kind: str,
    ) -> Tuple[QtFieldAdapter, QWidget]:
        if kind == "check":
            checkbox = QCheckBox(label, parent)
            return CheckBoxField(key, checkbox), checkbox
        if kind == "number":
            number = QLineEdit(parent)
            number.setPlaceholderText("0")
            return NumberField(key, number), number
        edit = QLineEdit(parent)
        edit.setPlaceholderText("#rrggbb")
        adapter = LineEditField(key, edit)
        container = QWidget(parent)
        row = QHBoxLayout(container)
        row.setContentsMargins(0, 0, 0, 0)
        pick = QPushButton("…", container)
        pick.setFixedWidth(28)
        pick.clicked.connect(self._color_picker(adapter))
        row.addWidget(edit, 1)
        row.addWidget(pick)
        return adapter, container

    def _build_quick_slots(self) -> Tuple[QWidget, List[QtFieldAdapter]]:
        box = QGroupBox("Quick slots (Ctrl+1 … Ctrl+0)", self)
        grid = QGridLayout(box)
        adapters: List[QtFieldAdapter] = []
        for index, name in enumerate(quick_slot_names()):
            edit = QLineEdit(box)
            edit.setPlaceholderText("profile")
            adapters.append(LineEditField(name, edit))
            row, column = divmod(index, 5)
            grid.addWidget(QLabel(str(index + 1), box), row, column * 2)
            grid.addWidget(edit, row, column * 2 + 1)
        return box, adapters

    def _build_transfer(self) -> QWidget:
        box = QGroupBox("Import / export", self)
        layout = QVBoxLayout(box)
        self.transfer_edit = QPlainTextEdit(box)
        self.transfer_edit.setObjectName("dataTransfer")
        self.transfer_edit.setPlaceholderText("Settings JSON")
        buttons = QHBoxLayout()
        self.export_button = QPushButton("Export", box)
        self.import_button = QPushButton("Import", box)
        buttons.addWidget(self.export_button)
        buttons.addWidget(self.import_button)
        buttons.addStretch(1)
        layout.addWidget(self.transfer_edit)
        layout.addLayout(buttons)
        return box

    def _build_footer(self) -> QHBoxLayout:
        row = QHBoxLayout()
        self.defaults_button = QPushButton("Reset to defaults", self)
        self.hide_button = QPushButton("Hide", self)
        row.addWidget(self.defaults_button)
        row.addStretch(1)
        row.addWidget(self.hide_button)
        return row

    def _connect_buttons(self) -> None:
        self.load_button.clicked.connect(lambda: self.controller.load())
        self.save_button.clicked.connect(lambda: self.controller.save())
        self.new_button.clicked.connect(lambda: self.controller.create())
        self.delete_button.clicked.connect(lambda: self.controller.remove())
        self.export_button.clicked.connect(lambda: self.controller.export_settings())
        self.import_button.clicked.connect(lambda: self.controller.import_settings())
        self.defaults_button.clicked.connect(lambda: self.controller.reset_to_defaults())
        self.hide_button.clicked.connect(self.hide_window)

    def _color_picker(self, adapter: QtFieldAdapter) -> Callable[[], None]:
        def _pick() -> None:
            current = QColor(str(adapter.read()))
            chosen = QColorDialog.getColor(current if current.isValid() else QColor("white"), self)
            if chosen.isValid():
                adapter.write(chosen.name(), notify=True)

        return _pick

    # Collaborator hooks ----------------------------------------------------

    def show_error(self, message: str) -> None:
        QMessageBox.warning(self, "Reticle Settings", message)

    def prompt_label(self, text: str) -> Optional[str]:
        name, accepted = QInputDialog.getText(self, "New profile", text)
        return name if accepted else None

    def set_profile_controls_enabled(self, enabled: bool) -> None:
        for widget in (self.profile_combo, self.load_button, self.save_button, self.delete_button):
            widget.setEnabled(enabled)

    def hide_window(self) -> None:
        self.showMinimized()

    def _hotkeys_enabled(self) -> bool:
        return self._store.get("hotkeysEnabled") is not False

    def adapter(self, key: str) -> Optional[QtFieldAdapter]:
        return self._adapters.get(key)
