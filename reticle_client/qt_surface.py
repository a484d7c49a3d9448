"""QPainter-backed reticle surface."""
from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from PyQt6.QtCore import QPointF, QRectF, Qt, QVariantAnimation, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QPainter, QPaintEvent, QPen, QResizeEvent
from PyQt6.QtWidgets import QWidget

from reticle_client.reticle_renderer import BAR_NAMES, BarGeometry, CircleGeometry, Point


def _qcolor(value: str) -> QColor:
    color = QColor(value)
    if not color.isValid():
        color = QColor("white")
    return color


class ReticleCanvas(QWidget):
    """Holds the six reticle primitives and paints them; the cross bars rotate as a group."""

    resized = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._circles: Dict[str, CircleGeometry] = {}
        self._bars: Dict[str, BarGeometry] = {}
        self._pivot: Point = (0.0, 0.0)
        self._angle = 0.0
        self._animation: Optional[QVariantAnimation] = None

    @property
    def rotation(self) -> Tuple[float, Point]:
        return self._angle, self._pivot

    # ReticleSurface ------------------------------------------------------

    def viewport_size(self) -> Tuple[float, float]:
        return float(self.width()), float(self.height())

    def apply_circle(self, name: str, geometry: CircleGeometry) -> None:
        self._circles[name] = geometry
        self.update()

    def apply_bar(self, name: str, geometry: BarGeometry) -> None:
        self._bars[name] = geometry
        self.update()

    def stop_rotation(self, pivot: Point) -> None:
        animation = self._animation
        self._animation = None
        if animation is not None:
            animation.stop()
            animation.deleteLater()
        self._pivot = pivot
        self._angle = 0.0
        self.update()

    def animate_rotation(self, pivot: Point, period_ms: int, on_complete: Callable[[], None]) -> None:
        self.stop_rotation(pivot)
        animation = QVariantAnimation(self)
        animation.setStartValue(0.0)
        animation.setEndValue(360.0)
        animation.setDuration(max(1, int(period_ms)))
        animation.valueChanged.connect(self._set_angle)

        def _finished() -> None:
            if self._animation is animation:
                self._animation = None
                animation.deleteLater()
                on_complete()

        animation.finished.connect(_finished)
        self._animation = animation
        animation.start()

    def _set_angle(self, value: object) -> None:
        try:
            self._angle = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return
        self.update()

    # Qt events -----------------------------------------------------------

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802
        super().resizeEvent(event)
        self.resized.emit()

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            for name in ("outer_circle", "center_dot"):
                circle = self._circles.get(name)
                if circle is not None and circle.visible:
                    self._paint_circle(painter, circle)
            painter.save()
            pivot_x, pivot_y = self._pivot
            painter.translate(pivot_x, pivot_y)
            painter.rotate(self._angle)
            painter.translate(-pivot_x, -pivot_y)
            for name in BAR_NAMES:
                bar = self._bars.get(name)
                if bar is not None and bar.visible:
                    painter.setPen(Qt.PenStyle.NoPen)
                    painter.setBrush(QBrush(_qcolor(bar.fill)))
                    painter.drawRect(QRectF(bar.left, bar.top, bar.width, bar.height))
            painter.restore()
        finally:
            painter.end()

    @staticmethod
    def _paint_circle(painter: QPainter, circle: CircleGeometry) -> None:
        pen = QPen(_qcolor(circle.stroke))
        pen.setWidthF(max(0.0, circle.stroke_width))
        painter.setPen(pen)
        if circle.fill:
            painter.setBrush(QBrush(_qcolor(circle.fill)))
        else:
            painter.setBrush(Qt.BrushStyle.NoBrush)
        radius = max(0.0, circle.radius)
        painter.drawEllipse(QPointF(circle.cx, circle.cy), radius, radius)
