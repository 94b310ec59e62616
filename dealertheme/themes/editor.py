"""In-memory token editing with preview, persistence and activation."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import yaml

from dealertheme.errors import ErrorCode, ThemeError
from dealertheme.themes.constants import DEFAULT_TOKENS, SECTIONS
from dealertheme.themes.models import LoadResult, Theme, TokenDocument
from dealertheme.themes.validation import validate_token_document

if TYPE_CHECKING:
    from dealertheme.core.theme_store import ThemeStore
    from dealertheme.themes.service import ThemeLoader

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


class TokenEditor:
    """Working copy of one theme's token document.

    Edits stay local until ``save``. ``preview`` pushes the working copy to
    the registry without touching the store. The editor owns all writes to
    the store; the loader only reads.
    """

    def __init__(self, store: ThemeStore, loader: ThemeLoader, theme_id: str) -> None:
        theme = store.get_theme(theme_id)
        if theme is None:
            raise ThemeError(ErrorCode.THEME_NOT_FOUND, theme_id=theme_id)
        self._store = store
        self._loader = loader
        self._theme = theme
        documents = store.get_token_documents(theme_id)
        self._document: TokenDocument | None = documents[0] if documents else None
        self._tokens: dict[str, Any] = (
            copy.deepcopy(self._document.tokens)
            if self._document is not None
            else copy.deepcopy(DEFAULT_TOKENS)
        )
        self._dirty = False

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def tokens(self) -> dict[str, Any]:
        return copy.deepcopy(self._tokens)

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def set_token(self, section: str, key: str, value: str) -> None:
        """Set ``section.key``, e.g. ``colors.primary`` or ``typography.fontFamily``."""
        _check_section(section)
        target = self._tokens.setdefault(section, {})
        if not isinstance(target, dict):
            target = {}
            self._tokens[section] = target
        target[key] = value
        self._dirty = True

    def set_nested_token(self, section: str, group: str, key: str, value: str) -> None:
        """Set ``section.group.key``, e.g. ``typography.fontSize.lg``."""
        _check_section(section)
        parent = self._tokens.setdefault(section, {})
        if not isinstance(parent, dict):
            parent = {}
            self._tokens[section] = parent
        target = parent.setdefault(group, {})
        if not isinstance(target, dict):
            target = {}
            parent[group] = target
        target[key] = value
        self._dirty = True

    def set_token_path(self, path: str, value: str) -> None:
        """Set a token by dotted path: ``colors.primary`` or ``typography.fontSize.lg``."""
        parts = path.strip().split(".")
        if len(parts) not in (2, 3) or not all(parts):
            raise ValueError(f"Token path must be SECTION.KEY or SECTION.GROUP.KEY: {path!r}")
        if len(parts) == 2:
            self.set_token(parts[0], parts[1], value)
        else:
            self.set_nested_token(parts[0], parts[1], parts[2], value)

    def replace_tokens(self, tokens: dict[str, Any]) -> None:
        self._tokens = copy.deepcopy(tokens)
        self._dirty = True

    def reset_to_defaults(self) -> None:
        self.replace_tokens(DEFAULT_TOKENS)

    def preview(self) -> None:
        """Apply the working copy to the registry without persisting it."""
        self._loader.apply_tokens(self._tokens)

    def save(self) -> LoadResult | None:
        """Validate and persist the working copy.

        Reloads the theme when it is the active one and returns that load
        result; returns None for inactive themes.
        """
        tokens = validate_token_document(self._tokens)
        if self._document is None:
            self._document = self._store.add_token_document(self._theme.theme_id, tokens)
        else:
            self._document = self._store.update_tokens(self._document.document_id, tokens)
        self._tokens = copy.deepcopy(tokens)
        self._dirty = False
        logger.info("Saved design tokens for theme %s", self._theme.theme_id)

        theme = self._store.get_theme(self._theme.theme_id)
        if theme is None:
            raise ThemeError(ErrorCode.THEME_NOT_FOUND, theme_id=self._theme.theme_id)
        self._theme = theme
        if not theme.is_active:
            return None
        return self._loader.load_and_apply_active_theme()

    def activate(self) -> LoadResult:
        """Make this theme the active one and reload."""
        self._theme = self._store.set_active_theme(self._theme.theme_id)
        logger.info("Activated theme %s", self._theme.theme_id)
        return self._loader.load_and_apply_active_theme()

    def export_tokens(self, path: str | Path) -> Path:
        """Write the working copy as JSON, or YAML for .yaml/.yml paths."""
        target = Path(path)
        if target.suffix.lower() in _YAML_SUFFIXES:
            text = yaml.safe_dump(self._tokens, default_flow_style=False, sort_keys=False)
        else:
            text = json.dumps(self._tokens, indent=2, ensure_ascii=False) + "\n"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        return target

    def import_tokens(self, path: str | Path) -> None:
        """Replace the working copy with a JSON or YAML token file."""
        self.replace_tokens(read_token_file(path))


def read_token_file(path: str | Path) -> dict[str, Any]:
    """Read a token document from a JSON or YAML file."""
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ThemeError(ErrorCode.FILE_NOT_FOUND, path=source) from exc
    except PermissionError as exc:
        raise ThemeError(ErrorCode.FILE_ACCESS_DENIED, path=source) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ThemeError(ErrorCode.FILE_INVALID, path=source, details={"original": str(exc)}) from exc

    try:
        if source.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ThemeError(ErrorCode.FILE_INVALID, path=source, details={"original": str(exc)}) from exc
    if not isinstance(data, dict):
        raise ThemeError(ErrorCode.FILE_INVALID, path=source)
    return data


def token_paths(tokens: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten a token document into ``(dotted path, value)`` pairs in section order."""
    pairs: list[tuple[str, str]] = []
    for section in SECTIONS:
        block = tokens.get(section)
        if not isinstance(block, dict):
            continue
        for key, value in block.items():
            if isinstance(value, dict):
                pairs.extend((f"{section}.{key}.{inner}", str(item)) for inner, item in value.items())
            else:
                pairs.append((f"{section}.{key}", str(value)))
    return pairs


def _check_section(section: str) -> None:
    if section not in SECTIONS:
        raise ValueError(f"Unknown token section: {section!r}")
