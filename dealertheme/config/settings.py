"""Application settings via QSettings."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from PySide6.QtCore import QSettings

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class AppSettings:
    """Wraps QSettings for persistent app configuration.

    With ``path`` the settings live in that INI file instead of the
    platform store.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        if path is None:
            self._qs = QSettings("DealerTheme", "DealerTheme")
        else:
            self._qs = QSettings(str(path), QSettings.Format.IniFormat)

    def sync(self) -> None:
        self._qs.sync()

    # -- store --

    @property
    def store_path(self) -> Path:
        raw = self._qs.value("store/path", "", type=str)
        value = (raw or "").strip()
        if value:
            return Path(value).expanduser()
        return self.app_data_dir / "themes.db"

    @store_path.setter
    def store_path(self, value: str | Path) -> None:
        self._qs.setValue("store/path", str(value or "").strip())

    # -- theme --

    @property
    def reset_on_switch(self) -> bool:
        return bool(self._qs.value("theme/reset_on_switch", True, type=bool))

    @reset_on_switch.setter
    def reset_on_switch(self, value: bool) -> None:
        self._qs.setValue("theme/reset_on_switch", bool(value))

    @property
    def validate_tokens(self) -> bool:
        return bool(self._qs.value("theme/validate_tokens", True, type=bool))

    @validate_tokens.setter
    def validate_tokens(self, value: bool) -> None:
        self._qs.setValue("theme/validate_tokens", bool(value))

    # -- logging --

    @property
    def log_level(self) -> str:
        raw = self._qs.value("logging/level", "INFO", type=str)
        level = (raw or "").strip().upper()
        if level in _LOG_LEVELS:
            return level
        return "INFO"

    @log_level.setter
    def log_level(self, value: str) -> None:
        level = (value or "").strip().upper()
        if level not in _LOG_LEVELS:
            level = "INFO"
        self._qs.setValue("logging/level", level)

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    # -- window geometry --

    @property
    def window_geometry(self) -> bytes | None:
        return self._qs.value("ui/window_geometry")

    @window_geometry.setter
    def window_geometry(self, value: bytes) -> None:
        self._qs.setValue("ui/window_geometry", value)

    # -- helpers --

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def logs_dir(self) -> Path:
        path = self.app_data_dir / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "dealertheme"
