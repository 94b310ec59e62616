"""Design-token theming exports."""

from dealertheme.themes.applier import apply_tokens, custom_properties
from dealertheme.themes.compiler import compile_root_css, resolve_stylesheet
from dealertheme.themes.constants import DEFAULT_TOKENS
from dealertheme.themes.editor import TokenEditor
from dealertheme.themes.models import (
    ActiveTheme,
    LoadResult,
    LoadStatus,
    Theme,
    TokenDocument,
    TokenValidationError,
)
from dealertheme.themes.registry import StyleRegistry
from dealertheme.themes.service import ThemeLoader
from dealertheme.themes.validation import validate_token_document

__all__ = [
    "DEFAULT_TOKENS",
    "ActiveTheme",
    "LoadResult",
    "LoadStatus",
    "StyleRegistry",
    "Theme",
    "ThemeLoader",
    "TokenDocument",
    "TokenEditor",
    "TokenValidationError",
    "apply_tokens",
    "compile_root_css",
    "custom_properties",
    "resolve_stylesheet",
    "validate_token_document",
]
