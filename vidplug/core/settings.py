"""
Source Settings - Resolves the active endpoint and user settings.

The host hands a plugin its ``config.json`` and the user's current setting
values when the plugin is enabled. ``SourceSettings`` wraps both and answers
the questions the network layer asks on every call: which base URL is
selected, and which default headers to send.
"""

import logging
from typing import Dict, Optional

from vidplug.core.config_schemas import PluginConfig


logger = logging.getLogger(__name__)


BASE_URL_SETTING = "baseUrl"


class SourceSettings:
    """Read-only view over a plugin config and the user's setting values."""

    def __init__(self, config: Optional[PluginConfig] = None, values: Optional[Dict[str, str]] = None):
        """
        Initialize source settings.

        Args:
            config: Plugin configuration, or None before the plugin is enabled
            values: User-selected setting values keyed by variable name
        """
        self.config = config
        self.values = dict(values or {})

    def get_plugin_setting(self, variable: str, default: Optional[str] = None) -> str:
        """
        Get a plugin setting value.

        Runtime values win over config defaults. Dropdown values given as an
        option index are mapped to the option itself.

        Args:
            variable: The setting variable name
            default: Fallback when neither the user nor the config has a value

        Returns:
            The setting value, or an empty string
        """
        setting = self.config.get_setting(variable) if self.config else None

        if variable in self.values:
            value = self.values[variable]
        elif setting is not None and setting.default:
            value = setting.default
        else:
            return default or ""

        if setting is not None and setting.type == "Dropdown" and value.isdigit():
            index = int(value)
            if 0 <= index < len(setting.options):
                return setting.options[index]
        return value

    def get_base_url(self) -> str:
        """
        Get the active API base URL.

        Uses the user's selection from the ``baseUrl`` dropdown; available URLs
        are the options of that setting.

        Returns:
            The active base URL, or an empty string when unconfigured
        """
        if self.config is None:
            logger.warning("get_base_url() called before the plugin was enabled")
            return ""

        setting = self.config.get_setting(BASE_URL_SETTING)
        available_urls = setting.options if setting else []

        if not available_urls:
            logger.warning("No base URLs configured in settings")
            return ""

        selected = self.get_plugin_setting(BASE_URL_SETTING, available_urls[0])
        return selected or available_urls[0]

    def get_default_headers(self) -> Dict[str, str]:
        """Get default HTTP headers from ``constants.defaultHeaders``."""
        if self.config is None:
            return {}
        return dict(self.config.constants.default_headers)

    def get_constant(self, key: str, default=None):
        """Get a free-form value from the config ``constants`` block."""
        if self.config is None:
            return default
        extra = self.config.constants.model_extra or {}
        return extra.get(key, default)


__all__ = ["SourceSettings", "BASE_URL_SETTING"]
