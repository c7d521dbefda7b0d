"""
CLI Context - Shared state for command implementations.

Holds the tooling settings resolved by the main callback so command modules
do not import the app.
"""

from typing import Optional

from vidplug.core.config_schemas import ToolingSettings
from vidplug.tools.project import ProjectLayout


# Global application state
_settings: Optional[ToolingSettings] = None
_debug = False


def get_tooling_settings() -> ToolingSettings:
    """Get the tooling settings, defaults when the callback has not run."""
    global _settings
    if _settings is None:
        _settings = ToolingSettings()
    return _settings


def set_tooling_settings(settings: ToolingSettings, debug: bool = False) -> None:
    global _settings, _debug
    _settings = settings
    _debug = debug


def get_layout() -> ProjectLayout:
    return ProjectLayout(get_tooling_settings())


def is_debug() -> bool:
    return _debug


__all__ = [
    "get_tooling_settings",
    "set_tooling_settings",
    "get_layout",
    "is_debug",
]
