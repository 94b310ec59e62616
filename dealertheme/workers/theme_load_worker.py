"""Worker for reading the active theme off the UI thread."""

from __future__ import annotations

import logging
from threading import Event
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from dealertheme.errors import classify_exception
from dealertheme.themes.models import FetchOutcome

if TYPE_CHECKING:
    from dealertheme.core.theme_store import ThemeStore

logger = logging.getLogger(__name__)


def fetch_active(store: ThemeStore, generation: int) -> FetchOutcome:
    """Read the active theme and its documents; failures land in ``error``."""
    try:
        active = store.fetch_active_theme()
    except Exception as exc:
        logger.debug("active theme fetch failed (generation %s): %s", generation, exc)
        return FetchOutcome(generation=generation, error=classify_exception(exc))
    return FetchOutcome(generation=generation, active=active)


class ThemeLoadWorker(QObject):
    """Fetches the active theme for one load generation.

    Usage:
        worker = ThemeLoadWorker(store, generation)
        thread = QThread()
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(thread.quit)
        worker.finished.connect(worker.deleteLater)
        thread.finished.connect(thread.deleteLater)
        thread.start()
    """

    started = Signal()
    finished = Signal(object)           # FetchOutcome
    error = Signal(str)                 # error message
    cancelled = Signal()

    def __init__(self, store: ThemeStore, generation: int, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._store = store
        self._generation = generation
        self._cancel_event = Event()

    @property
    def generation(self) -> int:
        return self._generation

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def _is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def run(self) -> None:
        self.started.emit()
        if self._is_cancelled:
            self.cancelled.emit()
            return
        outcome = fetch_active(self._store, self._generation)
        if self._is_cancelled:
            self.cancelled.emit()
            return
        if outcome.error is not None:
            self.error.emit(str(outcome.error))
        self.finished.emit(outcome)
