"""Shared fixtures for dealertheme tests."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication

from dealertheme.core.theme_store import ThemeStore
from dealertheme.themes.registry import StyleRegistry
from dealertheme.themes.service import ThemeLoader


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def store(tmp_path):
    theme_store = ThemeStore(tmp_path / "themes.db")
    theme_store.open()
    yield theme_store
    theme_store.close()


@pytest.fixture
def registry():
    return StyleRegistry()


@pytest.fixture
def loader(store, registry):
    theme_loader = ThemeLoader(store, registry)
    yield theme_loader
    theme_loader.shutdown()
