"""
UI Layer - Rich console, error panels and spinners for the CLI.
"""

from vidplug.ui.console import get_console, setup_console
from vidplug.ui.themes import ColorPalette, get_palette, get_theme
from vidplug.ui.error_handler import ErrorHandler, handle_error, display_warning, display_info
from vidplug.ui.progress import status_spinner

__all__ = [
    # Console Management
    "get_console",
    "setup_console",
    # Theme
    "ColorPalette",
    "get_palette",
    "get_theme",
    # Error Handling
    "ErrorHandler",
    "handle_error",
    "display_warning",
    "display_info",
    # Progress
    "status_spinner",
]
