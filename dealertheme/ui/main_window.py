"""Theme admin window with a live preview."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from dealertheme.errors import ThemeError, format_error_for_user
from dealertheme.themes.editor import TokenEditor
from dealertheme.ui.token_editor_panel import TokenEditorPanel

if TYPE_CHECKING:
    from dealertheme.config.settings import AppSettings
    from dealertheme.core.theme_store import ThemeStore
    from dealertheme.themes.service import ThemeLoader


class ThemeAdminWindow(QMainWindow):
    """Pick, edit, activate and preview themes."""

    def __init__(
        self,
        settings: AppSettings,
        store: ThemeStore,
        loader: ThemeLoader,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._store = store
        self._loader = loader
        self.setWindowTitle("Dealership Themes")
        self.setMinimumWidth(900)
        self._setup_ui()
        self._populate_themes()
        self._loader.theme_applied.connect(self._on_theme_applied)
        self._loader.load_failed.connect(self._on_load_failed)

        geometry = self._settings.window_geometry
        if geometry:
            self.restoreGeometry(geometry)

    def _setup_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)

        self._theme_combo = QComboBox()
        self._theme_combo.setMinimumContentsLength(28)
        self._theme_combo.currentIndexChanged.connect(self._on_theme_selected)
        self._activate_btn = QPushButton("Activate")
        self._activate_btn.setObjectName("PrimaryButton")
        self._activate_btn.clicked.connect(self._activate_selected)
        self._reload_btn = QPushButton("Reload")
        self._reload_btn.clicked.connect(self._reload)

        theme_row = QHBoxLayout()
        theme_row.setContentsMargins(0, 0, 0, 0)
        theme_row.addWidget(QLabel("Theme:"))
        theme_row.addWidget(self._theme_combo, 1)
        theme_row.addWidget(self._activate_btn)
        theme_row.addWidget(self._reload_btn)
        layout.addLayout(theme_row)

        card = QFrame()
        card.setObjectName("PreviewCard")
        card_layout = QVBoxLayout(card)
        heading = QLabel("Sample Heading")
        heading.setObjectName("PreviewHeading")
        body = QLabel(
            "New arrivals, certified pre-owned inventory and same-day service "
            "bookings, styled by the active theme."
        )
        body.setObjectName("PreviewBody")
        body.setWordWrap(True)
        cta = QPushButton("Book a Test Drive")
        cta.setObjectName("PrimaryButton")
        card_layout.addWidget(heading)
        card_layout.addWidget(body)
        card_layout.addWidget(cta, 0, Qt.AlignmentFlag.AlignLeft)
        self._token_panel = TokenEditorPanel()
        self._token_panel.status_changed.connect(self._on_panel_status)
        self._token_panel.saved.connect(self._on_tokens_saved)

        body_row = QHBoxLayout()
        body_row.setContentsMargins(0, 0, 0, 0)
        body_row.addWidget(self._token_panel, 3)
        body_row.addWidget(card, 2)
        layout.addLayout(body_row, 1)

        self._status = QLabel("")
        self._status.setObjectName("StatusMessage")
        self._status.setWordWrap(True)
        layout.addWidget(self._status)

        self.setCentralWidget(central)

    def _populate_themes(self) -> None:
        self._theme_combo.blockSignals(True)
        self._theme_combo.clear()
        active_index = 0
        for theme in self._store.list_themes():
            label = theme.name
            if theme.is_staging:
                label += " (staging)"
            if theme.is_active:
                label += " - active"
                active_index = self._theme_combo.count()
            self._theme_combo.addItem(label, theme.theme_id)
        self._theme_combo.setCurrentIndex(active_index)
        self._theme_combo.blockSignals(False)
        self._on_theme_selected()
        has_themes = self._theme_combo.count() > 0
        self._activate_btn.setEnabled(has_themes)
        if not has_themes:
            self._set_status("No themes yet. Create one with 'dealertheme create'.", error=False)

    def _on_theme_selected(self, _index: int = -1) -> None:
        previous = self._token_panel.editor
        theme_id = self._theme_combo.currentData()
        editor = None
        if isinstance(theme_id, str) and theme_id:
            try:
                editor = TokenEditor(self._store, self._loader, theme_id)
            except ThemeError as exc:
                self._set_status(format_error_for_user(exc), error=True)
        self._token_panel.set_editor(editor)
        if previous is not None and previous.is_dirty:
            # drop unsaved previews of the previous selection
            self._loader.load_active_theme_async()

    def _on_panel_status(self, message: str, error: bool) -> None:
        self._set_status(message, error=error)

    def _on_tokens_saved(self, result) -> None:
        if result is None:
            # saved theme is inactive; restore the active theme's styles
            self._loader.load_active_theme_async()

    def _activate_selected(self) -> None:
        theme_id = self._theme_combo.currentData()
        if not isinstance(theme_id, str) or not theme_id:
            return
        try:
            self._store.set_active_theme(theme_id)
        except ThemeError as exc:
            QMessageBox.warning(self, "Activate Theme", format_error_for_user(exc))
            return
        self._populate_themes()
        self._loader.load_active_theme_async()

    def _reload(self) -> None:
        self._populate_themes()
        self._loader.load_active_theme_async()

    def _on_theme_applied(self, theme_id: str) -> None:
        theme = self._store.get_theme(theme_id)
        name = theme.name if theme is not None else theme_id
        self._set_status(f"Applied theme: {name}", error=False)

    def _on_load_failed(self, message: str) -> None:
        self._set_status(message, error=True)

    def _set_status(self, message: str, *, error: bool) -> None:
        self._status.setObjectName("StatusError" if error else "StatusMessage")
        self._status.setText(message)
        self._status.style().unpolish(self._status)
        self._status.style().polish(self._status)

    def closeEvent(self, event) -> None:
        self._settings.window_geometry = self.saveGeometry()
        super().closeEvent(event)
