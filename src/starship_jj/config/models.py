"""Configuration models.

``GlobalConfig`` holds the settings shared by every module; ``Config`` adds
the ordered module list, written as ``[[module]]`` tables in TOML.

Both are pydantic settings: ``SJJ__`` environment variables, with ``__``
between nested keys, override whatever is passed to the constructor.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from starship_jj.modules import ModuleConfig, default_modules

ENV_PREFIX = "SJJ__"


class BookmarkConfig(BaseModel):
    """Settings for locating bookmarks near the working copy."""

    search_depth: int = Field(default=100, ge=1)
    """Number of ancestors of ``@-`` searched for bookmarks."""
    exclude: list[str] = Field(default_factory=list)
    """Glob patterns; matching bookmark names are never shown."""

    @field_validator("exclude")
    @classmethod
    def check_globs(cls, patterns: list[str]) -> list[str]:
        if any(not pattern for pattern in patterns):
            raise ValueError("Exclude patterns must not be empty")
        return patterns


class GlobalConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="forbid",
    )

    module_separator: str = " "
    """Text printed after every module that produced output."""
    timeout: Optional[int] = Field(default=None, ge=0)
    """Render deadline in milliseconds; unset means no deadline."""
    reset_color: bool = True
    """Reset the terminal style after the last module."""
    bookmarks: BookmarkConfig = Field(default_factory=BookmarkConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Constructor values carry the config file, so the environment wins.
        return env_settings, init_settings


class Config(GlobalConfig):
    module: list[ModuleConfig] = Field(default_factory=default_modules)
    """Output modules in rendering order."""

    @property
    def modules(self) -> list[ModuleConfig]:
        return self.module

    @classmethod
    def defaults(cls) -> Config:
        """Built-in configuration, ignoring the environment."""
        return cls.model_validate({})

    def dump(self) -> dict:
        """Serialize using the keys the configuration file expects."""
        return self.model_dump(mode="json", exclude_none=True)
