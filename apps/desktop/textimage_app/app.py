"""Desktop editor window: style controls, font uploads, live preview, and download."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QAction, QColor, QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QCheckBox,
    QColorDialog,
    QComboBox,
    QFileDialog,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from textimage_core import (
    AppConfig,
    DiagnosticsExporter,
    EditorSession,
    build_doctor_payload,
    export_dir,
    initial_state,
    load_config,
    remember_state,
    save_config,
)
from textimage_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from textimage_renderer import (
    BACKGROUND_COLOR_PRESETS,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    SURFACE_HEIGHT,
    SURFACE_WIDTH,
    SYSTEM_FONTS,
    TEXT_COLOR_PRESETS,
    FontLoadError,
    ImageExporter,
    InvalidColorError,
    encode_png,
    to_hex,
)

_FONT_FILTER = "Fonts (*.ttf *.otf *.woff *.woff2)"
_UPLOAD_HINT = "Click to upload TTF, OTF, WOFF, WOFF2 files"
_INVALID_FIELD = "border: 1px solid #e53e3e;"


class ColorField(QWidget):
    """Picker button, paired hex field, and preset swatches for one color."""

    def __init__(self, window: TextImageWindow, field: str, presets: tuple[str, ...]) -> None:
        super().__init__(window)
        self.editor = window
        self.field = field

        self.picker = QPushButton()
        self.picker.setFixedSize(48, 32)
        self.picker.clicked.connect(self._pick)
        self.hex_edit = QLineEdit()
        self.hex_edit.textEdited.connect(self._edited)

        row = QHBoxLayout()
        row.addWidget(self.picker)
        row.addWidget(self.hex_edit, 1)

        swatches = QHBoxLayout()
        swatches.setSpacing(4)
        for color in presets:
            btn = QPushButton()
            btn.setFixedSize(24, 24)
            btn.setToolTip(color)
            btn.setStyleSheet(f"background-color: {color}; border: 2px solid #d1d5db; border-radius: 4px;")
            btn.clicked.connect(lambda _checked=False, c=color: self.editor.apply_style(**{self.field: c}))
            swatches.addWidget(btn)
        swatches.addStretch(1)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(row)
        layout.addLayout(swatches)

    def sync(self, value: str) -> None:
        if self.hex_edit.text() != value:
            self.hex_edit.setText(value)
        self.hex_edit.setStyleSheet("")
        self.picker.setStyleSheet(f"background-color: {to_hex(value)}; border: 1px solid #d1d5db;")

    @Slot()
    def _pick(self) -> None:
        current = getattr(self.editor.session.state, self.field)
        color = QColorDialog.getColor(QColor(to_hex(current)), self)
        if color.isValid():
            self.editor.apply_style(**{self.field: color.name()})

    @Slot(str)
    def _edited(self, text: str) -> None:
        try:
            state = self.editor.session.update(**{self.field: text})
        except InvalidColorError:
            # Keep the last valid color until the field parses again.
            self.hex_edit.setStyleSheet(_INVALID_FIELD)
            return
        self.sync(getattr(state, self.field))


class TextImageWindow(QMainWindow):
    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__()
        self.config = config or load_config()
        self.logger = get_logger("app")
        self.session = EditorSession(
            state=initial_state(self.config),
            exporter=ImageExporter(export_dir(self.config), self.config.export.filename, self.config.export.overwrite),
            on_font_error=self._alert,
        )
        self.diagnostics = DiagnosticsExporter()

        self.setWindowTitle("Text to Image Generator")
        self._build_menu()

        controls = QVBoxLayout()
        controls.addWidget(self._build_font_upload())
        controls.addWidget(self._build_text_input())
        controls.addWidget(self._build_font_settings())
        controls.addWidget(self._build_style_options())
        controls.addWidget(self._build_colors())
        download = QPushButton("Download Image")
        download.clicked.connect(self.download)
        controls.addWidget(download)
        controls.addStretch(1)

        root = QHBoxLayout()
        root.addLayout(controls, 1)
        root.addWidget(self._build_preview(), 1)
        central = QWidget()
        central.setLayout(root)
        self.setCentralWidget(central)

        self._refresh_fonts()
        self._sync_controls()
        self.session.subscribe(self._on_repaint)
        self._on_repaint(self.session.surface)

    # Layout

    def _build_menu(self) -> None:
        menu = self.menuBar().addMenu("&File")
        diagnostics_action = QAction("Export Diagnostics", self)
        diagnostics_action.triggered.connect(self.export_diagnostics)
        menu.addAction(diagnostics_action)
        menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.close)
        menu.addAction(quit_action)

    def _build_font_upload(self) -> QGroupBox:
        box = QGroupBox("Upload Custom Fonts")
        self.upload_button = QPushButton(_UPLOAD_HINT)
        self.upload_button.clicked.connect(self.upload_fonts)
        self.custom_list = QListWidget()
        self.custom_list.setMaximumHeight(110)
        remove = QPushButton("Remove Selected Font")
        remove.clicked.connect(self.remove_selected_font)

        layout = QVBoxLayout(box)
        layout.addWidget(self.upload_button)
        layout.addWidget(QLabel("Uploaded Fonts:"))
        layout.addWidget(self.custom_list)
        layout.addWidget(remove)
        return box

    def _build_text_input(self) -> QGroupBox:
        box = QGroupBox("Your Text")
        self.text_edit = QPlainTextEdit()
        self.text_edit.setPlaceholderText("Enter your text here...")
        self.text_edit.setMaximumHeight(90)
        self.text_edit.textChanged.connect(lambda: self.apply_style(text=self.text_edit.toPlainText()))
        layout = QVBoxLayout(box)
        layout.addWidget(self.text_edit)
        return box

    def _build_font_settings(self) -> QGroupBox:
        box = QGroupBox("Font")
        self.family_combo = QComboBox()
        self.family_combo.currentIndexChanged.connect(self._family_changed)

        self.size_label = QLabel()
        self.size_slider = QSlider(Qt.Orientation.Horizontal)
        self.size_slider.setRange(FONT_SIZE_MIN, FONT_SIZE_MAX)
        self.size_slider.valueChanged.connect(lambda v: self.apply_style(font_size_px=v))

        layout = QGridLayout(box)
        layout.addWidget(QLabel("Font Family"), 0, 0)
        layout.addWidget(self.family_combo, 1, 0)
        layout.addWidget(self.size_label, 0, 1)
        layout.addWidget(self.size_slider, 1, 1)
        return box

    def _build_style_options(self) -> QGroupBox:
        box = QGroupBox("Text Style")
        self.bold_check = QCheckBox("Bold")
        self.italic_check = QCheckBox("Italic")
        self.underline_check = QCheckBox("Underline")
        self.bold_check.toggled.connect(lambda on: self.apply_style(bold=on))
        self.italic_check.toggled.connect(lambda on: self.apply_style(italic=on))
        self.underline_check.toggled.connect(lambda on: self.apply_style(underline=on))

        layout = QHBoxLayout(box)
        for check in (self.bold_check, self.italic_check, self.underline_check):
            layout.addWidget(check)
        layout.addStretch(1)
        return box

    def _build_colors(self) -> QGroupBox:
        box = QGroupBox("Colors")
        self.text_color = ColorField(self, "text_color", TEXT_COLOR_PRESETS)
        self.background_color = ColorField(self, "background_color", BACKGROUND_COLOR_PRESETS)

        layout = QGridLayout(box)
        layout.addWidget(QLabel("Text Color"), 0, 0)
        layout.addWidget(self.text_color, 1, 0)
        layout.addWidget(QLabel("Background Color"), 0, 1)
        layout.addWidget(self.background_color, 1, 1)
        return box

    def _build_preview(self) -> QGroupBox:
        box = QGroupBox("Preview")
        self.preview = QLabel()
        self.preview.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview.setMinimumSize(SURFACE_WIDTH // 2, SURFACE_HEIGHT // 2)
        caption = QLabel(f"Image Size: {SURFACE_WIDTH} × {SURFACE_HEIGHT} pixels")
        caption.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout = QVBoxLayout(box)
        layout.addWidget(self.preview, 1)
        layout.addWidget(caption)
        return box

    # State <-> widgets

    def apply_style(self, **changes) -> None:
        self.session.update(**changes)
        self._sync_controls()

    def _sync_controls(self) -> None:
        state = self.session.state
        if self.text_edit.toPlainText() != state.text:
            self.text_edit.blockSignals(True)
            self.text_edit.setPlainText(state.text)
            self.text_edit.blockSignals(False)
        self.size_label.setText(f"Font Size: {state.font_size_px}px")
        for widget, value in (
            (self.size_slider, state.font_size_px),
            (self.bold_check, state.bold),
            (self.italic_check, state.italic),
            (self.underline_check, state.underline),
        ):
            widget.blockSignals(True)
            if isinstance(widget, QSlider):
                widget.setValue(value)
            else:
                widget.setChecked(value)
            widget.blockSignals(False)
        if self.family_combo.currentData() != state.font_family:
            self.family_combo.blockSignals(True)
            self.family_combo.setCurrentIndex(self.family_combo.findData(state.font_family))
            self.family_combo.blockSignals(False)
        self.text_color.sync(state.text_color)
        self.background_color.sync(state.background_color)

    def _refresh_fonts(self) -> None:
        custom = self.session.registry.names()
        self.family_combo.blockSignals(True)
        self.family_combo.clear()
        self._add_family_group("System Fonts", SYSTEM_FONTS)
        extra = [n for n in custom if n not in SYSTEM_FONTS]
        if extra:
            self._add_family_group("Custom Fonts", extra)
        self.family_combo.setCurrentIndex(self.family_combo.findData(self.session.state.font_family))
        self.family_combo.blockSignals(False)

        self.custom_list.clear()
        for font in self.session.registry.fonts():
            self.custom_list.addItem(font.name)

    def _add_family_group(self, title: str, names) -> None:
        # Header rows carry no data and cannot be picked.
        self.family_combo.addItem(title)
        header = self.family_combo.model().item(self.family_combo.count() - 1)
        header.setFlags(Qt.ItemFlag.NoItemFlags)
        for name in names:
            self.family_combo.addItem(name, name)

    def _on_repaint(self, surface) -> None:
        if surface is None:
            return
        pixmap = QPixmap()
        pixmap.loadFromData(encode_png(surface), "PNG")
        width = max(self.preview.width(), SURFACE_WIDTH // 2)
        self.preview.setPixmap(pixmap.scaledToWidth(min(width, SURFACE_WIDTH), Qt.TransformationMode.SmoothTransformation))

    # Actions

    @Slot(int)
    def _family_changed(self, _index: int) -> None:
        name = self.family_combo.currentData()
        if name:
            self.apply_style(font_family=name)

    @Slot()
    def upload_fonts(self) -> None:
        files, _ = QFileDialog.getOpenFileNames(self, "Upload Custom Fonts", "", _FONT_FILTER)
        if not files:
            return
        self.upload_button.setText("Loading fonts...")
        self.upload_button.setEnabled(False)
        QApplication.processEvents()
        try:
            report = self.session.load_font_files(Path(f) for f in files)
        finally:
            self.upload_button.setText(_UPLOAD_HINT)
            self.upload_button.setEnabled(True)
        self._refresh_fonts()
        self._sync_controls()
        self.statusBar().showMessage(f"Loaded {len(report.loaded)} font(s)", 4000)

    @Slot()
    def remove_selected_font(self) -> None:
        item = self.custom_list.currentItem()
        if item is None:
            return
        self.session.remove_font(item.text())
        self._refresh_fonts()
        self._sync_controls()

    @Slot()
    def download(self) -> None:
        suggested = str(self.session.exporter.target_path())
        path, _ = QFileDialog.getSaveFileName(self, "Download Image", suggested, "PNG Image (*.png)")
        if not path:
            return
        saved = self.session.export_to(Path(path))
        if saved is not None:
            self.statusBar().showMessage(f"Saved {saved}", 4000)

    @Slot()
    def export_diagnostics(self) -> None:
        payload = build_doctor_payload(self.config)
        bundle = self.diagnostics.bundle(cfg=self.config, doctor_payload=payload, output_dir=Path(tempfile.gettempdir()))
        self.statusBar().showMessage(f"Diagnostics written to {bundle}", 6000)

    def _alert(self, error: FontLoadError) -> None:
        QMessageBox.warning(self, "Font Upload", str(error))

    def shutdown(self) -> None:
        remember_state(self.config, self.session.state)
        save_config(self.config)


def run_gui() -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files)
    install_crash_hooks()
    logger = get_logger()

    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    QApplication.setHighDpiScaleFactorRoundingPolicy(Qt.HighDpiScaleFactorRoundingPolicy.PassThrough)

    app = QApplication(sys.argv)
    app.setApplicationName("TextImage")

    window = TextImageWindow(cfg)
    window.resize(1200, 720)
    window.show()

    exit_code = app.exec()
    window.shutdown()
    logger.info("app shutdown", extra={"event": "shutdown", "exit_code": int(exit_code)})
    return int(exit_code)
