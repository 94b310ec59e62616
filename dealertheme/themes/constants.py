"""Theme framework constants."""

from __future__ import annotations

# Top-level sections of a token document, in application order.
SECTION_COLORS = "colors"
SECTION_TYPOGRAPHY = "typography"
SECTION_SPACING = "spacing"
SECTION_BORDER_RADIUS = "borderRadius"

SECTIONS: tuple[str, ...] = (
    SECTION_COLORS,
    SECTION_TYPOGRAPHY,
    SECTION_SPACING,
    SECTION_BORDER_RADIUS,
)

TYPOGRAPHY_FONT_FAMILY = "fontFamily"
TYPOGRAPHY_HEADING_FONT = "headingFont"
TYPOGRAPHY_FONT_SIZE = "fontSize"
TYPOGRAPHY_FONT_WEIGHT = "fontWeight"

TYPOGRAPHY_KEYS: tuple[str, ...] = (
    TYPOGRAPHY_FONT_FAMILY,
    TYPOGRAPHY_HEADING_FONT,
    TYPOGRAPHY_FONT_SIZE,
    TYPOGRAPHY_FONT_WEIGHT,
)

# Custom property names consumed by stylesheets. Must not change.
PREFIX_COLOR = "--color-"
PREFIX_FONT_SIZE = "--font-size-"
PREFIX_FONT_WEIGHT = "--font-weight-"
PREFIX_SPACING = "--spacing-"
PREFIX_BORDER_RADIUS = "--border-radius-"
PROP_FONT_FAMILY = "--font-family"
PROP_HEADING_FONT = "--heading-font"

TOKEN_PROPERTY_PREFIXES: tuple[str, ...] = (
    PREFIX_COLOR,
    PREFIX_FONT_SIZE,
    PREFIX_FONT_WEIGHT,
    PREFIX_SPACING,
    PREFIX_BORDER_RADIUS,
    PROP_FONT_FAMILY,
    PROP_HEADING_FONT,
)

DEFAULT_THEME_NAME = "Dealership Default"

DEFAULT_TOKENS: dict[str, object] = {
    "colors": {
        "primary": "#D7FF00",
        "secondary": "#C8FF1A",
        "accent": "#39FF14",
        "background": "#0B0B0C",
        "surface": "#1A1B1E",
        "text": "#FFFFFF",
        "textSecondary": "#9CA3AF",
        "success": "#10B981",
        "warning": "#F59E0B",
        "error": "#EF4444",
    },
    "typography": {
        "fontFamily": "Inter, system-ui, sans-serif",
        "headingFont": "Inter, system-ui, sans-serif",
        "fontSize": {
            "xs": "0.75rem",
            "sm": "0.875rem",
            "base": "1rem",
            "lg": "1.125rem",
            "xl": "1.25rem",
            "2xl": "1.5rem",
            "3xl": "1.875rem",
            "4xl": "2.25rem",
        },
        "fontWeight": {
            "normal": "400",
            "medium": "500",
            "bold": "700",
            "black": "900",
        },
    },
    "spacing": {
        "xs": "0.25rem",
        "sm": "0.5rem",
        "md": "1rem",
        "lg": "1.5rem",
        "xl": "2rem",
        "2xl": "3rem",
        "3xl": "4rem",
        "4xl": "6rem",
    },
    "borderRadius": {
        "sm": "0.125rem",
        "md": "0.375rem",
        "lg": "0.5rem",
        "xl": "0.75rem",
    },
}
