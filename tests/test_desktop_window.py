from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from textimage_app.app import TextImageWindow
from textimage_core.config import AppConfig
from textimage_renderer import CustomFont


@pytest.fixture
def window():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    win = TextImageWindow(AppConfig())
    yield win
    win.deleteLater()
    app.processEvents()


def test_valid_hex_after_invalid_clears_marker(window) -> None:
    field = window.text_color
    field._edited("#zzz")
    assert field.hex_edit.styleSheet() != ""
    assert window.session.state.text_color == "#000000"

    field._edited("#00ff00")
    assert window.session.state.text_color == "#00ff00"
    assert field.hex_edit.styleSheet() == ""
    assert "#00ff00" in field.picker.styleSheet()


def test_family_combo_groups_system_and_custom(window) -> None:
    window.session.registry.register(CustomFont("Brand", "Brand.ttf"), b"font")
    window._refresh_fonts()
    combo = window.family_combo
    texts = [combo.itemText(i) for i in range(combo.count())]

    assert texts[0] == "System Fonts"
    assert not combo.model().item(0).isSelectable()
    assert combo.itemData(0) is None
    assert combo.currentData() == "Arial"

    custom_header = texts.index("Custom Fonts")
    assert custom_header > texts.index("Palatino")
    assert not combo.model().item(custom_header).isEnabled()
    assert texts[custom_header + 1 :] == ["Brand"]

    combo.setCurrentIndex(custom_header + 1)
    assert window.session.state.font_family == "Brand"
