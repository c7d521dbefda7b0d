"""
Project Layout - Where a plugin project keeps its files, and the build step.

A plugin project holds its script and ``config.json`` at the root; ``build``
assembles them into ``dist/``, which is what gets signed, served to a test
device, and submitted.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from vidplug.core.config_manager import ConfigManager
from vidplug.core.config_schemas import PluginConfig, ToolingSettings
from vidplug.core.exceptions import ToolingError
from vidplug.tools.shell import ensure_dir


logger = logging.getLogger(__name__)


class ProjectLayout:
    """Resolved paths of a plugin project."""

    def __init__(self, settings: Optional[ToolingSettings] = None):
        self.settings = settings or ToolingSettings()
        self.root = Path(self.settings.project_dir).resolve()

    @property
    def script_path(self) -> Path:
        return self.root / self.settings.script_name

    @property
    def config_path(self) -> Path:
        return self.root / self.settings.config_name

    @property
    def dist_dir(self) -> Path:
        return self.root / self.settings.dist_dir

    @property
    def dist_script_path(self) -> Path:
        return self.dist_dir / self.settings.script_name

    @property
    def dist_config_path(self) -> Path:
        return self.dist_dir / self.settings.config_name

    @property
    def secrets_dir(self) -> Path:
        return self.root / self.settings.secrets_dir

    @property
    def private_key_path(self) -> Path:
        return self.secrets_dir / "signing_key.pem"

    def require_dist(self) -> None:
        """
        Check that ``dist/`` holds a built plugin.

        Raises:
            ToolingError: If the built script or config is missing
        """
        for path in (self.dist_script_path, self.dist_config_path):
            if not path.exists():
                raise ToolingError(f"{path.relative_to(self.root)} not found. Run 'vidplug build' first.")


def build_plugin(layout: ProjectLayout, bump_version: bool = False) -> PluginConfig:
    """
    Assemble the plugin into ``dist/``.

    Args:
        layout: Project paths
        bump_version: Increment ``version`` in the project config first

    Returns:
        The configuration written to ``dist/``

    Raises:
        ToolingError: If the project script or config is missing
        ConfigurationError: If the project config is invalid
    """
    if not layout.script_path.exists():
        raise ToolingError(f"Plugin script not found: {layout.script_path}")

    manager = ConfigManager(layout.config_path)
    config = manager.config

    if bump_version:
        config = manager.update(version=config.version + 1)
        logger.info(f"Version bumped to {config.version}")

    ensure_dir(layout.dist_dir)
    shutil.copy2(layout.script_path, layout.dist_script_path)
    ConfigManager(layout.dist_config_path).save(config)

    logger.info(f"Built {config.name} v{config.version} into {layout.dist_dir}")
    return config


__all__ = ["ProjectLayout", "build_plugin"]
