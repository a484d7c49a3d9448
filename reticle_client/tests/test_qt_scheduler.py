from __future__ import annotations

import os

import pytest

from PyQt6.QtCore import QEventLoop, QTimer
from PyQt6.QtWidgets import QApplication

from reticle_client.qt_scheduler import QtScheduler


@pytest.fixture(scope="module")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def _spin(ms: int) -> None:
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


@pytest.mark.pyqt_required
def test_after_runs_callback_once(qt_app):
    calls: list[str] = []
    scheduler = QtScheduler()

    scheduler.after(5, lambda: calls.append("fired"))
    _spin(50)

    assert calls == ["fired"]


@pytest.mark.pyqt_required
def test_cancel_prevents_callback(qt_app):
    calls: list[str] = []
    scheduler = QtScheduler()

    handle = scheduler.after(20, lambda: calls.append("fired"))
    scheduler.cancel(handle)
    scheduler.cancel(None)
    _spin(60)

    assert calls == []
