from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer


class QtScheduler:
    """``after``/``after_cancel`` pair backed by single-shot QTimers."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent

    def after(self, ms: int, callback: Callable[[], None]) -> QTimer:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        timer.timeout.connect(timer.deleteLater)
        timer.start(max(0, int(ms)))
        return timer

    def cancel(self, handle: object) -> None:
        if isinstance(handle, QTimer):
            handle.stop()
            handle.deleteLater()
