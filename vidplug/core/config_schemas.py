"""
Configuration Schemas - Pydantic models for plugin configuration validation.

This module defines the structure of a plugin's ``config.json`` (the file the
media browser host installs from) and the defaults used by the developer
tooling. ``config.json`` is camelCase on disk; the models expose snake_case
attributes and preserve unknown keys so a load/save round-trip never drops
host fields this toolkit does not model.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PluginSetting(BaseModel):
    """A user-facing setting declared in ``config.json``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    variable: Optional[str] = Field(default=None, description="Setting variable name")
    name: Optional[str] = Field(default=None, description="Display name shown to user")
    description: Optional[str] = Field(default=None, description="Description shown to user")
    type: Optional[Literal["Dropdown", "Header", "Boolean"]] = Field(default=None, description="Setting type")
    default: Optional[str] = Field(default=None, description="Default value")
    options: List[str] = Field(default_factory=list, description="Options for dropdown settings")
    warning_dialog: Optional[str] = Field(default=None, alias="warningDialog")
    dependency: Optional[str] = Field(default=None, description="Setting this one depends on")


class PluginConstants(BaseModel):
    """Free-form constants block; ``defaultHeaders`` is the only modelled key."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    default_headers: Dict[str, str] = Field(default_factory=dict, alias="defaultHeaders")


class PluginConfig(BaseModel):
    """Validated contents of a plugin ``config.json``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(default="Generated", description="Name of the source")
    id: Optional[str] = Field(default=None, description="Unique plugin ID (UUID format)")
    description: Optional[str] = None
    author: Optional[str] = None
    author_url: Optional[str] = Field(default=None, alias="authorUrl")
    version: int = Field(default=1, ge=1, description="Plugin version number")
    platform_url: str = Field(default="", alias="platformUrl")
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
    repository_url: Optional[str] = Field(default=None, alias="repositoryUrl")
    script_url: Optional[str] = Field(default=None, alias="scriptUrl")
    icon_url: Optional[str] = Field(default=None, alias="iconUrl")
    script_signature: Optional[str] = Field(default=None, alias="scriptSignature")
    script_public_key: Optional[str] = Field(default=None, alias="scriptPublicKey")
    packages: List[str] = Field(default_factory=lambda: ["Http"])
    allow_eval: bool = Field(default=False, alias="allowEval")
    allow_urls: List[str] = Field(default_factory=list, alias="allowUrls")
    settings: List[PluginSetting] = Field(default_factory=list)
    constants: PluginConstants = Field(default_factory=PluginConstants)
    authentication: Optional[Dict[str, Any]] = None

    @field_validator("platform_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Store the platform URL without a trailing slash."""
        return v.rstrip("/")

    def get_setting(self, variable: str) -> Optional[PluginSetting]:
        """Get a declared setting by variable name."""
        for setting in self.settings:
            if setting.variable == variable:
                return setting
        return None

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump in the on-disk camelCase shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ToolingSettings(BaseModel):
    """Defaults for the developer workflow commands."""

    project_dir: str = Field(default=".", description="Plugin project root")
    dist_dir: str = Field(default="dist", description="Build output directory")
    secrets_dir: str = Field(default=".secrets", description="Directory holding the signing key")
    script_name: str = Field(default="script.js", description="Plugin script file name")
    config_name: str = Field(default="config.json", description="Plugin config file name")
    dev_server_port: int = Field(default=11337, ge=1, le=65535, description="Host device dev server port")
    local_server_port: int = Field(default=3000, ge=1, le=65535, description="Local dist server port")
    probe_timeout: float = Field(default=1.0, gt=0, description="Seconds to wait per device probe")
    mdns_timeout: float = Field(default=3.0, gt=0, description="Seconds to browse for devices over mDNS")
    catalog_owner: str = Field(default="grayjay-sources")
    catalog_repo: str = Field(default="grayjay-sources.github.io")
    min_python: str = Field(default="3.9")


# Export all configuration models
__all__ = [
    "PluginSetting",
    "PluginConstants",
    "PluginConfig",
    "ToolingSettings",
]
