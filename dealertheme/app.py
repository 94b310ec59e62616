"""Runtime assembly, logging setup and QApplication bootstrap."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from dealertheme.config.settings import AppSettings
from dealertheme.core.theme_store import ThemeStore
from dealertheme.themes.registry import StyleRegistry
from dealertheme.themes.service import ThemeLoader


@dataclass
class ThemeRuntime:
    """Everything that shares one style registry."""

    settings: AppSettings
    store: ThemeStore
    registry: StyleRegistry
    loader: ThemeLoader

    def close(self) -> None:
        self.loader.shutdown()
        self.store.close()


def configure_logging(settings: AppSettings) -> logging.Logger:
    logger = logging.getLogger("dealertheme")
    if logger.handlers:
        return logger

    logger.setLevel(settings.log_level_number)
    handler = RotatingFileHandler(
        settings.logs_dir / "dealertheme.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def build_runtime(settings: AppSettings, store_path: Path | None = None) -> ThemeRuntime:
    """Open the store and wire registry and loader together."""
    store = ThemeStore(store_path or settings.store_path)
    store.open()
    registry = StyleRegistry()
    loader = ThemeLoader(
        store,
        registry,
        validate=settings.validate_tokens,
        reset_on_switch=settings.reset_on_switch,
    )
    return ThemeRuntime(settings=settings, store=store, registry=registry, loader=loader)


def run_app(settings: AppSettings | None = None, store_path: Path | None = None) -> int:
    """Initialize and run the theme admin window."""
    from PySide6.QtWidgets import QApplication

    from dealertheme.ui.main_window import ThemeAdminWindow
    from dealertheme.ui.stylesheet import QtStyleBinder

    app = QApplication.instance() or QApplication(sys.argv)
    app.setStyle("Fusion")
    app.setApplicationName("DealerTheme")
    app.setOrganizationName("DealerTheme")
    settings = settings or AppSettings()
    logger = configure_logging(settings)
    runtime = build_runtime(settings, store_path)
    logger.info("startup store=%s", runtime.store.db_path)

    binder = QtStyleBinder(app, runtime.registry)
    binder.refresh()
    result = runtime.loader.load_and_apply_active_theme()
    if not result.ok:
        logger.warning("startup theme not applied: %s", result.message)

    window = ThemeAdminWindow(settings, runtime.store, runtime.loader)
    window.show()

    exit_code = app.exec()
    runtime.close()
    return exit_code
