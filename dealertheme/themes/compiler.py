"""Stylesheet compilation helpers."""

from __future__ import annotations

import re
from typing import Mapping

from dealertheme.themes.registry import StyleRegistry

_VAR_RE = re.compile(r"var\(\s*(--[A-Za-z0-9_-]+)\s*(?:,\s*([^()]*?)\s*)?\)")


def compile_root_css(
    source: StyleRegistry | Mapping[str, str],
    *,
    selector: str = ":root",
) -> str:
    """Render custom properties as one CSS rule, sorted by name."""
    props = source.properties() if isinstance(source, StyleRegistry) else dict(source)
    lines = [f"{selector} {{"]
    for name in sorted(props):
        lines.append(f"  {name}: {props[name]};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def resolve_stylesheet(template: str, source: StyleRegistry | Mapping[str, str]) -> str:
    """Substitute ``var(--name[, fallback])`` references in a stylesheet.

    Qt stylesheets have no custom properties, so references are resolved
    before the sheet is handed to Qt. Unknown names use the fallback when one
    is given and are otherwise left in place.
    """
    props = source.properties() if isinstance(source, StyleRegistry) else dict(source)

    def _replace(match: re.Match[str]) -> str:
        name, fallback = match.group(1), match.group(2)
        if name in props:
            return props[name]
        if fallback is not None:
            return fallback
        return match.group(0)

    return _VAR_RE.sub(_replace, template)


def unresolved_names(template: str, source: StyleRegistry | Mapping[str, str]) -> list[str]:
    """Names referenced without fallback that the source does not define."""
    props = source.properties() if isinstance(source, StyleRegistry) else dict(source)
    missing: list[str] = []
    for match in _VAR_RE.finditer(template):
        name = match.group(1)
        if match.group(2) is None and name not in props and name not in missing:
            missing.append(name)
    return missing
