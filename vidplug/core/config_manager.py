"""
Configuration Manager - JSON-based plugin configuration management.

This module loads and persists a plugin's ``config.json`` with validation,
atomic writes, and thread-safe access. The developer tooling uses it to read
the built config, bump versions, and write signatures back.
"""

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from vidplug.core.config_schemas import PluginConfig
from vidplug.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Manages a plugin ``config.json`` with JSON persistence and validation.

    The file is loaded lazily on first access and cached; ``reload`` drops
    the cache. Writes go through a temporary file so a crash never leaves a
    half-written config behind.
    """

    def __init__(self, config_path: Union[str, Path]):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to the plugin ``config.json``
        """
        self.config_path = Path(config_path)
        self._lock = Lock()
        self._config: Optional[PluginConfig] = None

    def _load_config(self) -> PluginConfig:
        """Load and validate the plugin configuration."""
        if not self.config_path.exists():
            raise ConfigurationError(
                f"Config file not found: {self.config_path}",
                config_path=str(self.config_path),
            )

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            config = PluginConfig.model_validate(data)
            logger.debug(f"Loaded config for plugin '{config.name}' v{config.version}")
            return config
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Failed to parse {self.config_path.name}: {e}",
                config_path=str(self.config_path),
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid plugin configuration: {e}",
                config_path=str(self.config_path),
                details=e.errors(),
            )

    def _save_config(self, config: PluginConfig) -> None:
        """Save configuration to file with atomic write."""
        temp_file = self.config_path.with_suffix('.tmp')
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(config.to_json_dict(), f, indent=2, ensure_ascii=False)
                f.write("\n")
            temp_file.replace(self.config_path)
            logger.debug(f"Config saved to {self.config_path}")
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise ConfigurationError(
                f"Failed to save config: {e}",
                config_path=str(self.config_path),
            )

    @property
    def config(self) -> PluginConfig:
        """Get the current plugin configuration (thread-safe)."""
        with self._lock:
            if self._config is None:
                self._config = self._load_config()
            return self._config

    def reload(self) -> PluginConfig:
        """Drop the cached configuration and load it again from disk."""
        with self._lock:
            self._config = None
        return self.config

    def save(self, config: PluginConfig) -> None:
        """Persist ``config`` and make it the cached configuration."""
        with self._lock:
            self._save_config(config)
            self._config = config

    def update(self, **changes: Any) -> PluginConfig:
        """
        Update top-level config fields and save.

        Args:
            **changes: Field names (snake_case or camelCase) and new values

        Returns:
            The updated configuration

        Raises:
            ConfigurationError: If the updated configuration is invalid
        """
        data: Dict[str, Any] = self.config.to_json_dict()
        for key, value in changes.items():
            field = PluginConfig.model_fields.get(key)
            data[field.alias if field and field.alias else key] = value

        try:
            updated = PluginConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid config value: {e}",
                config_path=str(self.config_path),
            )

        self.save(updated)
        logger.info(f"Config updated: {', '.join(changes)}")
        return updated


# Export configuration manager
__all__ = ["ConfigManager"]
