"""Runtime theme loading and apply service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from PySide6.QtCore import QObject, QThread, Signal, Slot

from dealertheme.themes.applier import apply_tokens, custom_properties
from dealertheme.themes.constants import TOKEN_PROPERTY_PREFIXES
from dealertheme.themes.models import FetchOutcome, LoadResult, LoadStatus, TokenValidationError
from dealertheme.themes.validation import validate_token_document
from dealertheme.workers.theme_load_worker import ThemeLoadWorker, fetch_active

if TYPE_CHECKING:
    from dealertheme.core.theme_store import ThemeStore
    from dealertheme.themes.registry import StyleRegistry

logger = logging.getLogger(__name__)


class ThemeLoader(QObject):
    """Load the active theme from the store and apply it to a registry.

    Every load is stamped with a generation. A load only applies when no
    newer load has started since, so a slow response cannot overwrite a
    newer theme. Failures never raise and never touch the registry.
    """

    theme_applied = Signal(str)
    load_failed = Signal(str)

    def __init__(
        self,
        store: ThemeStore,
        registry: StyleRegistry,
        *,
        validate: bool = True,
        reset_on_switch: bool = True,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._registry = registry
        self._validate = validate
        self._reset_on_switch = reset_on_switch
        self._generation = 0
        self._active_theme_id: str | None = None
        self._last_result: LoadResult | None = None
        self._jobs: dict[int, tuple[QThread, ThemeLoadWorker]] = {}

    @property
    def store(self) -> ThemeStore:
        return self._store

    @property
    def registry(self) -> StyleRegistry:
        return self._registry

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def active_theme_id(self) -> str | None:
        """Id of the theme most recently applied by this loader."""
        return self._active_theme_id

    @property
    def last_result(self) -> LoadResult | None:
        return self._last_result

    def apply_tokens(self, document: Mapping[str, Any] | None) -> None:
        """Apply tokens directly, without the store. Used for live previews."""
        apply_tokens(document, self._registry)

    def begin_load(self) -> int:
        """Start a new load generation and cancel in-flight background fetches."""
        self._generation += 1
        for generation, (_thread, worker) in list(self._jobs.items()):
            if generation < self._generation:
                worker.cancel()
        return self._generation

    def load_and_apply_active_theme(self) -> LoadResult:
        """Fetch the active theme synchronously and apply it."""
        generation = self.begin_load()
        return self.complete_load(fetch_active(self._store, generation))

    def load_active_theme_async(self) -> int:
        """Fetch the active theme on a worker thread; apply when it returns.

        Returns the generation of the started load. The outcome is reported
        through ``theme_applied`` / ``load_failed`` and ``last_result``.
        """
        generation = self.begin_load()
        worker = ThemeLoadWorker(self._store, generation)
        thread = QThread(self)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._on_worker_finished)
        worker.finished.connect(thread.quit)
        worker.cancelled.connect(thread.quit)
        thread.finished.connect(lambda: self._jobs.pop(generation, None))
        thread.finished.connect(thread.deleteLater)
        self._jobs[generation] = (thread, worker)
        thread.start()
        return generation

    def shutdown(self, timeout_ms: int = 5000) -> None:
        """Cancel background fetches and wait for their threads to stop."""
        for thread, worker in list(self._jobs.values()):
            worker.cancel()
            thread.quit()
            thread.wait(timeout_ms)
        self._jobs.clear()

    def complete_load(self, outcome: FetchOutcome) -> LoadResult:
        """Apply a fetched outcome unless a newer load has started."""
        result = self._complete(outcome)
        if result.status is not LoadStatus.SUPERSEDED:
            self._last_result = result
        if result.ok:
            self.theme_applied.emit(result.theme_id or "")
        elif result.status is not LoadStatus.SUPERSEDED:
            self.load_failed.emit(result.message)
        return result

    def _complete(self, outcome: FetchOutcome) -> LoadResult:
        generation = outcome.generation
        if generation != self._generation:
            logger.debug(
                "discarding theme load generation %s; generation %s is newer",
                generation,
                self._generation,
            )
            return LoadResult(
                LoadStatus.SUPERSEDED,
                message="A newer theme load superseded this one.",
                generation=generation,
            )

        if outcome.error is not None:
            logger.error("Error fetching active theme: %s", outcome.error)
            return LoadResult(
                LoadStatus.STORAGE_ERROR,
                message=f"Error fetching active theme: {outcome.error}",
                generation=generation,
            )

        active = outcome.active
        if active is None:
            logger.warning("No active theme found; keeping current styles.")
            return LoadResult(
                LoadStatus.NOT_FOUND,
                message="No active theme found.",
                generation=generation,
            )

        theme_id = active.theme.theme_id
        tokens = active.tokens
        if tokens is None:
            logger.warning("No design tokens found for the active theme %s.", theme_id)
            return LoadResult(
                LoadStatus.NOT_FOUND,
                message=f"No design tokens found for theme {active.theme.name!r}.",
                theme_id=theme_id,
                generation=generation,
            )

        if self._validate:
            try:
                tokens = validate_token_document(tokens)
            except TokenValidationError as exc:
                logger.warning("Active theme %s has invalid tokens: %s", theme_id, exc)
                return LoadResult(
                    LoadStatus.INVALID,
                    message=f"Theme {active.theme.name!r} has invalid design tokens.",
                    theme_id=theme_id,
                    generation=generation,
                    problems=tuple(exc.problems),
                )

        props = custom_properties(tokens)
        if self._reset_on_switch:
            removed = self._registry.replace_prefixed(TOKEN_PROPERTY_PREFIXES, props)
            if removed:
                logger.debug("cleared %d stale token properties", len(removed))
        else:
            self._registry.update(props)
        self._active_theme_id = theme_id
        logger.info("Applied theme %s (%s), %d properties", active.theme.name, theme_id, len(props))
        return LoadResult(
            LoadStatus.APPLIED,
            message=f"Applied theme: {active.theme.name}",
            theme_id=theme_id,
            generation=generation,
        )

    @Slot(object)
    def _on_worker_finished(self, outcome: FetchOutcome) -> None:
        self.complete_load(outcome)
