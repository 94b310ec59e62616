"""Token document parsing and validation."""

from __future__ import annotations

import re
from typing import Any, Mapping

from dealertheme.themes.constants import (
    SECTION_BORDER_RADIUS,
    SECTION_COLORS,
    SECTION_SPACING,
    SECTION_TYPOGRAPHY,
    SECTIONS,
    TYPOGRAPHY_FONT_FAMILY,
    TYPOGRAPHY_FONT_SIZE,
    TYPOGRAPHY_FONT_WEIGHT,
    TYPOGRAPHY_HEADING_FONT,
    TYPOGRAPHY_KEYS,
)
from dealertheme.themes.models import TokenValidationError

_TOKEN_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_COLOR_RE = re.compile(r"^(?:rgb|rgba|hsl|hsla)\([^()]+\)$", re.IGNORECASE)
_LENGTH_RE = re.compile(
    r"^(?:0|-?(?:\d+(?:\.\d+)?|\.\d+)(?:px|rem|em|%|vh|vw|vmin|vmax|pt|ch|ex))$"
)
_FONT_WEIGHT_KEYWORDS = frozenset({"normal", "bold", "bolder", "lighter"})
_COLOR_KEYWORDS = frozenset({"transparent", "currentcolor", "inherit"})
_FORBIDDEN_CHARS = (";", "{", "}", "\n", "\r", "\t")

_MAX_TOKEN_KEY_LEN = 48
_MAX_VALUE_LEN = 64
_MAX_FONT_VALUE_LEN = 256
_MAX_ENTRIES_PER_SECTION = 128


def validate_token_document(data: object) -> dict[str, Any]:
    """Validate a token document and return a normalized copy.

    Sections are optional, but a section that is present must have the
    documented shape and every leaf must be a usable CSS value. All problems
    are collected and raised together as a TokenValidationError.
    """
    problems: list[str] = []
    if not isinstance(data, Mapping):
        raise TokenValidationError(["token document must be a mapping"])

    _reject_unknown_keys(data, allowed=set(SECTIONS), context="document", problems=problems)

    result: dict[str, Any] = {}
    colors = data.get(SECTION_COLORS)
    if colors is not None:
        result[SECTION_COLORS] = _parse_scale(
            colors, SECTION_COLORS, _check_color, problems
        )

    typography = data.get(SECTION_TYPOGRAPHY)
    if typography is not None:
        result[SECTION_TYPOGRAPHY] = _parse_typography(typography, problems)

    spacing = data.get(SECTION_SPACING)
    if spacing is not None:
        result[SECTION_SPACING] = _parse_scale(
            spacing, SECTION_SPACING, _check_length, problems
        )

    radius = data.get(SECTION_BORDER_RADIUS)
    if radius is not None:
        result[SECTION_BORDER_RADIUS] = _parse_scale(
            radius, SECTION_BORDER_RADIUS, _check_length, problems
        )

    if problems:
        raise TokenValidationError(problems)
    return result


def is_valid_color(value: str) -> bool:
    cleaned = value.strip()
    if _HEX_COLOR_RE.match(cleaned) or _FUNC_COLOR_RE.match(cleaned):
        return True
    return cleaned.lower() in _COLOR_KEYWORDS


def is_valid_length(value: str) -> bool:
    return bool(_LENGTH_RE.match(value.strip()))


def _parse_typography(data: object, problems: list[str]) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        problems.append(f"{SECTION_TYPOGRAPHY} must be a mapping")
        return {}
    _reject_unknown_keys(
        data, allowed=set(TYPOGRAPHY_KEYS), context=SECTION_TYPOGRAPHY, problems=problems
    )

    parsed: dict[str, Any] = {}
    for key in (TYPOGRAPHY_FONT_FAMILY, TYPOGRAPHY_HEADING_FONT):
        if key not in data:
            continue
        context = f"{SECTION_TYPOGRAPHY}.{key}"
        value = _clean_str(data[key], context, problems, max_len=_MAX_FONT_VALUE_LEN)
        if value is not None:
            parsed[key] = value

    size = data.get(TYPOGRAPHY_FONT_SIZE)
    if size is not None:
        parsed[TYPOGRAPHY_FONT_SIZE] = _parse_scale(
            size, f"{SECTION_TYPOGRAPHY}.{TYPOGRAPHY_FONT_SIZE}", _check_length, problems
        )
    weight = data.get(TYPOGRAPHY_FONT_WEIGHT)
    if weight is not None:
        parsed[TYPOGRAPHY_FONT_WEIGHT] = _parse_scale(
            weight, f"{SECTION_TYPOGRAPHY}.{TYPOGRAPHY_FONT_WEIGHT}", _check_font_weight, problems
        )
    return parsed


def _parse_scale(data: object, context: str, check, problems: list[str]) -> dict[str, str]:
    if not isinstance(data, Mapping):
        problems.append(f"{context} must be a mapping")
        return {}
    if len(data) > _MAX_ENTRIES_PER_SECTION:
        problems.append(f"{context} has more than {_MAX_ENTRIES_PER_SECTION} entries")
        return {}

    parsed: dict[str, str] = {}
    for key, raw in data.items():
        entry = f"{context}.{key}"
        if not isinstance(key, str) or not _TOKEN_KEY_RE.match(key) or len(key) > _MAX_TOKEN_KEY_LEN:
            problems.append(f"{context}: invalid token name {key!r}")
            continue
        value = _clean_str(raw, entry, problems, max_len=_MAX_VALUE_LEN)
        if value is None:
            continue
        if not check(value):
            problems.append(f"{entry} has invalid value {value!r}")
            continue
        parsed[key] = value
    return parsed


def _clean_str(raw: object, context: str, problems: list[str], *, max_len: int) -> str | None:
    if not isinstance(raw, str) or not raw.strip():
        problems.append(f"{context} must be a non-empty string")
        return None
    cleaned = raw.strip()
    if len(cleaned) > max_len:
        problems.append(f"{context} exceeds max length {max_len}")
        return None
    if any(ch in cleaned for ch in _FORBIDDEN_CHARS):
        problems.append(f"{context} contains a forbidden character")
        return None
    return cleaned


def _check_color(value: str) -> bool:
    return is_valid_color(value)


def _check_length(value: str) -> bool:
    return is_valid_length(value)


def _check_font_weight(value: str) -> bool:
    if value.lower() in _FONT_WEIGHT_KEYWORDS:
        return True
    # isdigit() alone accepts superscripts and other non-ASCII digits
    if not (value.isascii() and value.isdigit()):
        return False
    return 1 <= int(value) <= 1000


def _reject_unknown_keys(
    data: Mapping[Any, object],
    *,
    allowed: set[str],
    context: str,
    problems: list[str],
) -> None:
    unknown = sorted(str(key) for key in data.keys() if key not in allowed)
    if unknown:
        joined = ", ".join(unknown)
        problems.append(f"{context}: unsupported keys found: {joined}")
