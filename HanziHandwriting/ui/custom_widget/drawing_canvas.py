"""
Interactive drawing widget backed by a `DrawingSurface`.

Features:
- Left-drag draws a stroke with round caps and joins
- Leaving the widget ends the current stroke
- Resizing reallocates (and clears) the raster, like an HTML canvas

Coordinates:
- Widget-space and surface-space are identical; the surface is kept at the
  widget's size
"""
from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor, QImage, QMouseEvent, QPainter, QPen
from PyQt6.QtWidgets import QSizePolicy, QWidget

from HanziHandwriting.services.drawing.surface import DrawingSurface


class DrawingCanvas(QWidget):
    strokeFinished = pyqtSignal()
    cleared = pyqtSignal()

    def __init__(self, surface: DrawingSurface, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._surface = surface
        self.setMinimumSize(240, 240)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setCursor(Qt.CursorShape.CrossCursor)

    # -------- Public API --------
    @property
    def surface(self) -> DrawingSurface:
        return self._surface

    def clear(self) -> None:
        self._surface.clear()
        self.update()
        self.cleared.emit()

    # -------- Events --------
    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        pos = event.position()
        self._surface.begin_stroke((pos.x(), pos.y()))

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if not self._surface.is_drawing:
            return
        pos = event.position()
        self._surface.extend_stroke((pos.x(), pos.y()))
        self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._finish()

    def leaveEvent(self, event) -> None:
        self._finish()
        super().leaveEvent(event)

    def _finish(self) -> None:
        if self._surface.is_drawing:
            self._surface.end_stroke()
            self.strokeFinished.emit()

    def resizeEvent(self, event) -> None:
        size = event.size()
        if (size.width(), size.height()) != (self._surface.width, self._surface.height):
            self._surface.resize(size.width(), size.height())
        super().resizeEvent(event)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor('white'))
        img = self._surface.snapshot()
        data = img.tobytes('raw', 'RGBA')
        qimg = QImage(data, img.width, img.height, 4 * img.width, QImage.Format.Format_RGBA8888)
        painter.drawImage(0, 0, qimg)
        painter.setPen(QPen(QColor(200, 200, 200), 1))
        painter.drawRect(0, 0, self.width() - 1, self.height() - 1)
        painter.end()
