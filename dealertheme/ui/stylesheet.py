"""Qt stylesheet bound to the style registry."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Slot

from dealertheme.themes.compiler import resolve_stylesheet, unresolved_names

if TYPE_CHECKING:
    from PySide6.QtWidgets import QApplication

    from dealertheme.themes.registry import StyleRegistry

logger = logging.getLogger(__name__)

_REM_RE = re.compile(r"(?<![\w.-])(\d+(?:\.\d+)?|\.\d+)rem\b")
_ROOT_FONT_PX = 16

# Every value comes from the registry; fallbacks match the default tokens.
BASE_STYLESHEET = """
QWidget {
    background-color: var(--color-background, #0B0B0C);
    color: var(--color-text, #FFFFFF);
    font-family: var(--font-family, sans-serif);
    font-size: var(--font-size-base, 1rem);
}

QLabel {
    background-color: transparent;
}

#PreviewHeading {
    color: var(--color-primary, #D7FF00);
    font-family: var(--heading-font, sans-serif);
    font-size: var(--font-size-4xl, 2.25rem);
    font-weight: var(--font-weight-black, 900);
}

#PreviewBody {
    color: var(--color-textSecondary, #9CA3AF);
    font-size: var(--font-size-lg, 1.125rem);
}

#PreviewCard {
    background-color: var(--color-surface, #1A1B1E);
    border-radius: var(--border-radius-lg, 0.5rem);
    padding: var(--spacing-lg, 1.5rem);
}

QPushButton {
    background-color: var(--color-surface, #1A1B1E);
    border: 1px solid var(--color-textSecondary, #9CA3AF);
    border-radius: var(--border-radius-sm, 0.125rem);
    padding: var(--spacing-sm, 0.5rem) var(--spacing-md, 1rem);
}

QPushButton#PrimaryButton {
    background-color: var(--color-primary, #D7FF00);
    color: var(--color-background, #0B0B0C);
    font-weight: var(--font-weight-bold, 700);
}

QPushButton:hover {
    border-color: var(--color-accent, #39FF14);
}

#StatusMessage {
    color: var(--color-textSecondary, #9CA3AF);
    font-size: var(--font-size-sm, 0.875rem);
}

#StatusError {
    color: var(--color-error, #EF4444);
    font-size: var(--font-size-sm, 0.875rem);
}
"""


def build_stylesheet(registry: StyleRegistry, template: str = BASE_STYLESHEET) -> str:
    """Resolve the template against the registry; Qt has no rem, so use px."""
    return _REM_RE.sub(_rem_to_px, resolve_stylesheet(template, registry))


def _rem_to_px(match: re.Match[str]) -> str:
    px = float(match.group(1)) * _ROOT_FONT_PX
    return f"{px:g}px"


class QtStyleBinder(QObject):
    """Re-applies the application stylesheet whenever the registry changes."""

    def __init__(
        self,
        app: QApplication,
        registry: StyleRegistry,
        template: str = BASE_STYLESHEET,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._app = app
        self._registry = registry
        self._template = template
        registry.changed.connect(self.refresh)

    @Slot()
    def refresh(self) -> None:
        missing = unresolved_names(self._template, self._registry)
        if missing:
            logger.debug("stylesheet references undefined properties: %s", ", ".join(missing))
        self._app.setStyleSheet(build_stylesheet(self._registry, self._template))
