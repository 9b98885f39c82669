"""Qt drawing surface that feeds a :class:`SignatureCapture`."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, Qt, Signal
from PySide6.QtGui import QColor, QMouseEvent, QPainter, QPainterPath, QPaintEvent, QPen, QResizeEvent
from PySide6.QtWidgets import QSizePolicy, QWidget

from ..signature import SignatureCapture


class SignaturePadWidget(QWidget):
    """Mouse/stylus pad; a physical resize clears the signature."""

    changed = Signal()

    def __init__(self, capture: Optional[SignatureCapture] = None, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.capture = capture or SignatureCapture()
        width, height = self.capture.size
        self.setMinimumSize(120, 60)
        self.resize(width, height)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.setAttribute(Qt.WidgetAttribute.WA_StaticContents)
        self._pen = QPen(QColor(self.capture.pen_color), self.capture.pen_width)
        self._pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        self._pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)

    def clear(self) -> None:
        self.capture.clear()
        self.update()
        self.changed.emit()

    # --- Qt events -------------------------------------------------------
    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self.capture.pointer_down(pos.x(), pos.y())
            event.accept()
            self.update()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        pos = event.position()
        self.capture.pointer_move(pos.x(), pos.y())
        self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() == Qt.MouseButton.LeftButton:
            self.capture.pointer_up()
            event.accept()
            self.update()
            self.changed.emit()
            return
        super().mouseReleaseEvent(event)

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802
        size = event.size()
        if size.width() > 0 and size.height() > 0:
            had_strokes = not self.capture.is_empty()
            self.capture.resize(size.width(), size.height(), self.devicePixelRatioF())
            if had_strokes:
                self.changed.emit()
        super().resizeEvent(event)

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("white"))
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(self._pen)
        strokes = list(self.capture.strokes)
        if self.capture.current_stroke:
            strokes.append(self.capture.current_stroke)
        for stroke in strokes:
            if len(stroke) == 1:
                painter.drawPoint(QPointF(*stroke[0]))
                continue
            path = QPainterPath(QPointF(*stroke[0]))
            for point in stroke[1:]:
                path.lineTo(QPointF(*point))
            painter.drawPath(path)
        painter.end()


__all__ = ["SignaturePadWidget"]
