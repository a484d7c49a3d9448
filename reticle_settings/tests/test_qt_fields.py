from __future__ import annotations

import os

import pytest

from PyQt6.QtGui import QValidator
from PyQt6.QtWidgets import QApplication, QCheckBox, QComboBox, QLineEdit, QWidget

from reticle_settings.qt_fields import (
    CheckBoxField,
    ComboBoxField,
    ComboProfileSelector,
    LineEditField,
    NumberField,
    ShortcutHotkeys,
    quick_slot_key_sequence,
)


@pytest.fixture(scope="module")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def _recorder(adapter):
    fired: list[str] = []
    adapter.on_change(lambda: fired.append(adapter.key))
    return fired


@pytest.mark.pyqt_required
def test_suppressed_write_does_not_fire_user_callbacks(qt_app):
    adapter = NumberField("circleRadius", QLineEdit())
    fired = _recorder(adapter)

    adapter.write("42", notify=False)

    assert adapter.read() == "42"
    assert fired == []


@pytest.mark.pyqt_required
def test_notifying_write_fires_once_when_value_changes(qt_app):
    adapter = CheckBoxField("dotEnabled", QCheckBox())
    fired = _recorder(adapter)

    adapter.write(True, notify=True)
    adapter.write(True, notify=True)

    assert adapter.read() is True
    assert fired == ["dotEnabled"]


@pytest.mark.pyqt_required
def test_user_click_fires_change(qt_app):
    checkbox = QCheckBox()
    adapter = CheckBoxField("crossEnabled", checkbox)
    fired = _recorder(adapter)

    checkbox.click()

    assert fired == ["crossEnabled"]
    assert adapter.widget.objectName() == "crossEnabled"


@pytest.mark.pyqt_required
def test_line_edit_fires_on_editing_finished(qt_app):
    edit = QLineEdit()
    adapter = LineEditField("circleColor", edit)
    fired = _recorder(adapter)

    edit.setText("#abcdef")
    assert fired == []
    edit.editingFinished.emit()

    assert fired == ["circleColor"]
    assert adapter.read() == "#abcdef"


@pytest.mark.pyqt_required
def test_combo_box_field_selects_known_options_only(qt_app):
    combo = QComboBox()
    combo.addItems(["small", "large"])
    adapter = ComboBoxField("size", combo)

    adapter.write("large", notify=False)
    assert adapter.read() == "large"

    adapter.write("huge", notify=False)
    assert adapter.read() == "large"


@pytest.mark.pyqt_required
def test_profile_selector_deduplicates_and_clears(qt_app):
    selector = ComboProfileSelector(QComboBox())

    selector.set_options(["a", "b", "a"])
    selector.select("b")
    assert selector.widget.count() == 2
    assert selector.current() == "b"

    selector.select("")
    assert selector.current() == ""


@pytest.mark.pyqt_required
def test_quick_slot_key_sequences_wrap_to_zero(qt_app):
    assert quick_slot_key_sequence("quickSlot1").toString() == "Ctrl+1"
    assert quick_slot_key_sequence("quickSlot10").toString() == "Ctrl+0"


@pytest.mark.pyqt_required
def test_disabled_hotkeys_do_not_call_back(qt_app):
    enabled = {"value": False}
    hotkeys = ShortcutHotkeys(QWidget(), enabled=lambda: enabled["value"])
    calls: list[str] = []

    hotkeys._activate("quickSlot1", calls.append)
    enabled["value"] = True
    hotkeys._activate("quickSlot1", calls.append)

    assert calls == ["quickSlot1"]


@pytest.mark.pyqt_required
def test_number_field_keeps_written_values_verbatim(qt_app):
    adapter = NumberField("crossSpread", QLineEdit())

    for value in ("-5", "2.5", "2000", "600000"):
        adapter.write(value, notify=False)
        assert adapter.read() == value


@pytest.mark.pyqt_required
def test_number_field_rejects_non_numeric_typing(qt_app):
    edit = QLineEdit()
    NumberField("dotRadius", edit)
    validator = edit.validator()

    assert validator.validate("-2.5", 0)[0] == QValidator.State.Acceptable
    assert validator.validate("abc", 0)[0] == QValidator.State.Invalid
