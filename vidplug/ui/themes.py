"""
Theme System - Color palette and Rich theme for CLI output.
"""

from dataclasses import dataclass

from rich.theme import Theme


@dataclass
class ColorPalette:
    """Color palette definition for the CLI."""

    # Primary colors
    primary: str = "bright_blue"
    accent: str = "cyan"

    # Status colors
    success: str = "bright_green"
    warning: str = "yellow"
    error: str = "bright_red"
    info: str = "bright_cyan"

    # Text colors
    text_muted: str = "dim"


_palette = ColorPalette()


def get_palette() -> ColorPalette:
    return _palette


def get_theme() -> Theme:
    """Rich theme exposing the palette as named styles."""
    palette = get_palette()
    return Theme({
        "primary": palette.primary,
        "accent": palette.accent,
        "success": palette.success,
        "warning": palette.warning,
        "error": palette.error,
        "info": palette.info,
        "muted": palette.text_muted,
    })


__all__ = ["ColorPalette", "get_palette", "get_theme"]
