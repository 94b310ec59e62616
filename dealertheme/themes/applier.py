"""Apply token documents to a style registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from dealertheme.themes.constants import (
    PREFIX_BORDER_RADIUS,
    PREFIX_COLOR,
    PREFIX_FONT_SIZE,
    PREFIX_FONT_WEIGHT,
    PREFIX_SPACING,
    PROP_FONT_FAMILY,
    PROP_HEADING_FONT,
    SECTION_BORDER_RADIUS,
    SECTION_COLORS,
    SECTION_SPACING,
    SECTION_TYPOGRAPHY,
    TYPOGRAPHY_FONT_FAMILY,
    TYPOGRAPHY_FONT_SIZE,
    TYPOGRAPHY_FONT_WEIGHT,
    TYPOGRAPHY_HEADING_FONT,
)

if TYPE_CHECKING:
    from dealertheme.themes.registry import StyleRegistry


def custom_properties(document: Mapping[str, Any] | None) -> dict[str, str]:
    """Map a token document to custom property names and values.

    Missing or malformed sections are skipped. Nothing is validated here.
    """
    props: dict[str, str] = {}
    if not isinstance(document, Mapping):
        return props

    _add_scale(props, document.get(SECTION_COLORS), PREFIX_COLOR)

    typography = document.get(SECTION_TYPOGRAPHY)
    if isinstance(typography, Mapping):
        font_family = typography.get(TYPOGRAPHY_FONT_FAMILY)
        if font_family is not None:
            props[PROP_FONT_FAMILY] = str(font_family)
        heading_font = typography.get(TYPOGRAPHY_HEADING_FONT)
        if heading_font is not None:
            props[PROP_HEADING_FONT] = str(heading_font)
        _add_scale(props, typography.get(TYPOGRAPHY_FONT_SIZE), PREFIX_FONT_SIZE)
        _add_scale(props, typography.get(TYPOGRAPHY_FONT_WEIGHT), PREFIX_FONT_WEIGHT)

    _add_scale(props, document.get(SECTION_SPACING), PREFIX_SPACING)
    _add_scale(props, document.get(SECTION_BORDER_RADIUS), PREFIX_BORDER_RADIUS)
    return props


def apply_tokens(document: Mapping[str, Any] | None, registry: StyleRegistry) -> None:
    """Write every token leaf into the registry.

    Properties that the document does not mention keep their current value.
    """
    registry.update(custom_properties(document))


def _add_scale(props: dict[str, str], section: object, prefix: str) -> None:
    if not isinstance(section, Mapping):
        return
    for key, value in section.items():
        if value is None:
            continue
        props[f"{prefix}{key}"] = str(value)
