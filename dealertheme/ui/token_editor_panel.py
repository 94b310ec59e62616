"""Token editor panel with live preview."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtCore import Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QColorDialog,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from dealertheme.errors import ThemeError, classify_exception, format_error_for_user
from dealertheme.themes.constants import (
    SECTION_BORDER_RADIUS,
    SECTION_COLORS,
    SECTION_SPACING,
    SECTION_TYPOGRAPHY,
)
from dealertheme.themes.editor import token_paths
from dealertheme.themes.models import TokenValidationError
from dealertheme.themes.validation import validate_token_document

if TYPE_CHECKING:
    from dealertheme.themes.editor import TokenEditor

_TABS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Colors", (SECTION_COLORS,)),
    ("Typography", (SECTION_TYPOGRAPHY,)),
    ("Spacing", (SECTION_SPACING, SECTION_BORDER_RADIUS)),
)
_FILE_FILTER = "Token files (*.json *.yaml *.yml)"


class TokenEditorPanel(QWidget):
    """Edit one theme's tokens field by field.

    Every edit that leaves the document valid is previewed through the
    editor; nothing reaches the store until Save.
    """

    status_changed = Signal(str, bool)
    saved = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._editor: TokenEditor | None = None
        self._fields: dict[str, QLineEdit] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._tabs = QTabWidget()
        layout.addWidget(self._tabs, 1)

        self._save_btn = QPushButton("Save")
        self._save_btn.setObjectName("PrimaryButton")
        self._save_btn.clicked.connect(self._save)
        self._reset_btn = QPushButton("Reset to Defaults")
        self._reset_btn.clicked.connect(self._reset)
        self._import_btn = QPushButton("Import...")
        self._import_btn.clicked.connect(self._import)
        self._export_btn = QPushButton("Export...")
        self._export_btn.clicked.connect(self._export)

        button_row = QHBoxLayout()
        button_row.setContentsMargins(0, 0, 0, 0)
        button_row.addWidget(self._import_btn)
        button_row.addWidget(self._export_btn)
        button_row.addStretch(1)
        button_row.addWidget(self._reset_btn)
        button_row.addWidget(self._save_btn)
        layout.addLayout(button_row)

        self._set_enabled(False)

    @property
    def editor(self) -> TokenEditor | None:
        return self._editor

    def set_editor(self, editor: TokenEditor | None) -> None:
        self._editor = editor
        self._rebuild()
        self._set_enabled(editor is not None)

    def _rebuild(self) -> None:
        while self._tabs.count():
            page = self._tabs.widget(0)
            self._tabs.removeTab(0)
            page.deleteLater()
        self._fields.clear()
        if self._editor is None:
            return

        pairs = token_paths(self._editor.tokens)
        for title, sections in _TABS:
            page = QWidget()
            form = QFormLayout(page)
            for path, value in pairs:
                if path.split(".", 1)[0] in sections:
                    form.addRow(f"{path.split('.', 1)[1]}:", self._field_row(path, value))
            scroll = QScrollArea()
            scroll.setWidgetResizable(True)
            scroll.setWidget(page)
            self._tabs.addTab(scroll, title)

    def _field_row(self, path: str, value: str) -> QWidget:
        edit = QLineEdit(value)
        edit.textEdited.connect(lambda text, p=path: self._on_edited(p, text))
        self._fields[path] = edit
        if not path.startswith(f"{SECTION_COLORS}."):
            return edit

        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        pick_btn = QPushButton("Pick...")
        pick_btn.clicked.connect(lambda _checked=False, p=path: self._pick_color(p))
        row_layout.addWidget(edit, 1)
        row_layout.addWidget(pick_btn)
        return row

    def _on_edited(self, path: str, text: str) -> None:
        if self._editor is None:
            return
        self._editor.set_token_path(path, text.strip())
        self._preview()

    def _preview(self) -> None:
        if self._editor is None:
            return
        try:
            validate_token_document(self._editor.tokens)
        except TokenValidationError as exc:
            self.status_changed.emit(exc.problems[0], True)
            return
        self._editor.preview()
        self.status_changed.emit("Previewing unsaved changes.", False)

    def _pick_color(self, path: str) -> None:
        edit = self._fields.get(path)
        if edit is None:
            return
        current = QColor(edit.text())
        color = QColorDialog.getColor(
            current if current.isValid() else QColor("#000000"), self, "Pick Color"
        )
        if not color.isValid():
            return
        value = color.name().upper()
        edit.setText(value)
        self._on_edited(path, value)

    def _save(self) -> None:
        if self._editor is None:
            return
        try:
            result = self._editor.save()
        except (ThemeError, TokenValidationError) as exc:
            QMessageBox.warning(self, "Save Tokens", format_error_for_user(classify_exception(exc)))
            return
        if result is None:
            self.status_changed.emit(f"Saved tokens of {self._editor.theme.name}.", False)
        else:
            self.status_changed.emit(result.message, not result.ok)
        self.saved.emit(result)

    def _reset(self) -> None:
        if self._editor is None:
            return
        self._editor.reset_to_defaults()
        self._rebuild()
        self._editor.preview()
        self.status_changed.emit("Default tokens loaded. Save to keep them.", False)

    def _import(self) -> None:
        if self._editor is None:
            return
        path, _ = QFileDialog.getOpenFileName(self, "Import Tokens", "", _FILE_FILTER)
        if not path:
            return
        try:
            self._editor.import_tokens(path)
        except ThemeError as exc:
            QMessageBox.warning(self, "Import Tokens", format_error_for_user(exc))
            return
        self._rebuild()
        self._preview()

    def _export(self) -> None:
        if self._editor is None:
            return
        suggested = f"{self._editor.theme.name.lower().replace(' ', '-')}.json"
        path, _ = QFileDialog.getSaveFileName(self, "Export Tokens", suggested, _FILE_FILTER)
        if not path:
            return
        try:
            target = self._editor.export_tokens(path)
        except OSError as exc:
            error = classify_exception(exc, Path(path))
            QMessageBox.warning(self, "Export Tokens", format_error_for_user(error))
            return
        self.status_changed.emit(f"Exported tokens to {target}", False)

    def _set_enabled(self, enabled: bool) -> None:
        for button in (self._save_btn, self._reset_btn, self._import_btn, self._export_btn):
            button.setEnabled(enabled)
