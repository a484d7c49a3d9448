"""Transparent always-on-top window that draws the reticle from the settings store."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QVBoxLayout, QWidget

from reticle_client.qt_surface import ReticleCanvas
from reticle_client.reticle_renderer import ReticleGeometry, ReticleRenderer, coerce_bool
from reticle_settings.defaults import merged_defaults
from reticle_settings.profile_manager import PROFILE_PREFIX
from reticle_store.settings_store import SettingsStore

_LOGGER = logging.getLogger("ReticleOverlay.Client")


def build_render_snapshot(store: SettingsStore) -> Dict[str, Any]:
    """Current field values from the store, falling back to the built-in defaults."""
    snapshot = merged_defaults()
    for key in store.keys():
        if key.startswith(PROFILE_PREFIX):
            continue
        value = store.get(key)
        if value is not None:
            snapshot[key] = value
    return snapshot


def opacity_from_percent(raw: Any) -> float:
    try:
        percent = float(raw)
    except (TypeError, ValueError):
        return 1.0
    return max(0.0, min(percent, 100.0)) / 100.0


class ReticleOverlayWindow(QWidget):
    """Re-renders the reticle on every store change and on every resize."""

    def __init__(self, store: SettingsStore, *, logger: Optional[logging.Logger] = None) -> None:
        super().__init__()
        self._store = store
        self._logger = logger or _LOGGER
        self.setWindowTitle("Reticle Overlay")
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.canvas = ReticleCanvas(self)
        layout.addWidget(self.canvas)
        self.renderer = ReticleRenderer(self.canvas, logger=self._logger)
        self._click_through: Optional[bool] = None
        self._dispose_subscription = store.subscribe(self._on_store_changed)
        self.canvas.resized.connect(self.refresh)

    def refresh(self) -> ReticleGeometry:
        snapshot = build_render_snapshot(self._store)
        self._apply_window_settings(snapshot)
        return self.renderer.render(snapshot)

    def shutdown(self) -> None:
        dispose = self._dispose_subscription
        self._dispose_subscription = None
        if dispose is not None:
            dispose()
        self.canvas.stop_rotation(self.renderer.center)

    def _on_store_changed(self, key: str, new_value: Any, old_value: Any) -> None:
        if key.startswith(PROFILE_PREFIX):
            return
        self._logger.debug("Re-rendering after change to %s", key)
        self.refresh()

    def _apply_window_settings(self, snapshot: Dict[str, Any]) -> None:
        self.setWindowOpacity(opacity_from_percent(snapshot.get("overlayOpacity")))
        click_through = coerce_bool(snapshot.get("clickThrough", True))
        if click_through == self._click_through:
            return
        self._click_through = click_through
        visible = self.isVisible()
        self.setWindowFlag(Qt.WindowType.WindowTransparentForInput, click_through)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, click_through)
        if visible:
            self.show()
        self._logger.debug("Click-through set to %s", click_through)
