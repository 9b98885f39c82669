from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PySide6.QtCore import QPoint, Qt
    from PySide6.QtTest import QTest
    from PySide6.QtWidgets import QApplication
except ImportError as exc:  # pragma: no cover - environment-specific
    pytest.skip(f"PySide6 unavailable: {exc}", allow_module_level=True)

from modules.networking_report.signature import SignatureCapture  # noqa: E402
from modules.networking_report.ui.signature_pad import SignaturePadWidget  # noqa: E402


def _ensure_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def _draw(widget: SignaturePadWidget) -> None:
    QTest.mousePress(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(20, 20))
    QTest.mouseMove(widget, QPoint(60, 40))
    QTest.mouseRelease(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(60, 40))


def test_mouse_stroke_reaches_capture() -> None:
    _ensure_app()
    widget = SignaturePadWidget(SignatureCapture(300, 150))
    changes: list[int] = []
    widget.changed.connect(lambda: changes.append(1))
    try:
        widget.show()
        QApplication.processEvents()
        assert widget.capture.is_empty()

        _draw(widget)

        assert not widget.capture.is_empty()
        assert widget.capture.strokes[0][0] == (20.0, 20.0)
        assert changes
        widget.grab()
    finally:
        widget.close()


def test_clear_button_behaviour() -> None:
    _ensure_app()
    widget = SignaturePadWidget()
    try:
        widget.show()
        QApplication.processEvents()
        _draw(widget)
        widget.clear()
        assert widget.capture.is_empty()
    finally:
        widget.close()


def test_resize_clears_signature() -> None:
    _ensure_app()
    widget = SignaturePadWidget(SignatureCapture(300, 150))
    try:
        widget.show()
        QApplication.processEvents()
        _draw(widget)
        assert not widget.capture.is_empty()

        widget.resize(360, 180)
        QApplication.processEvents()

        assert widget.capture.is_empty()
        assert widget.capture.size == (360, 180)
    finally:
        widget.close()
