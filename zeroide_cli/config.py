"""Configuration management for zeroide-cli.

Configuration is loaded with project-level priority (no merging):

1. **config.toml** (display, response and custom theme settings):
   - Global: ~/.config/zeroide/config.toml
   - Project: .zeroide/config.toml (overrides global entirely)
   - Contains: display, response, themes

2. **Environment variables** (ZEROIDE_*):
   - Merged on top of config.toml
   - ZEROIDE_THEME, ZEROIDE_RESPONSE_DELAY, ZEROIDE_TIMESTAMP_FORMAT
"""

from __future__ import annotations

import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from zeroide_cli.logging import get_logger
from zeroide_cli.themes import CustomThemeConfig

logger = get_logger(__name__)

AUTO_THEME = "auto"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed or validated."""


# =============================================================================
# Configuration Models
# =============================================================================


class DisplayConfig(BaseModel):
    """Display configuration."""

    theme: str = AUTO_THEME
    """Theme name, or "auto" to follow the system appearance."""

    timestamp_format: str = "%H:%M"
    """strftime format for message timestamps."""


class ResponseConfig(BaseModel):
    """Assistant response configuration."""

    delay: float = Field(default=2.0, ge=0)
    """Seconds before the assistant reply is appended."""


class ZeroideConfig(BaseModel):
    """Complete zeroide-cli configuration."""

    display: DisplayConfig = Field(default_factory=DisplayConfig)
    response: ResponseConfig = Field(default_factory=ResponseConfig)
    themes: dict[str, dict[str, Any]] = Field(default_factory=dict)
    """Raw custom theme definitions keyed by theme name."""

    def get_custom_themes(self) -> dict[str, CustomThemeConfig]:
        """Validate custom theme definitions.

        Invalid definitions are skipped with a warning so one broken theme
        does not prevent startup.

        Returns:
            Valid custom themes keyed by name, in file order.
        """
        result: dict[str, CustomThemeConfig] = {}
        for name, data in self.themes.items():
            try:
                result[name] = CustomThemeConfig.model_validate(data)
            except ValidationError as e:
                logger.warning("Skipping invalid custom theme %r: %s", name, e.errors()[0].get("msg", e))
        return result

    @property
    def uses_auto_theme(self) -> bool:
        """Check if the theme should follow the system appearance."""
        return self.display.theme.lower() == AUTO_THEME


# =============================================================================
# Environment Settings (using pydantic-settings)
# =============================================================================


class EnvSettings(BaseSettings):
    """Settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ZEROIDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    theme: str | None = None
    timestamp_format: str | None = None
    response_delay: float | None = None


# =============================================================================
# ConfigManager
# =============================================================================


class ConfigManager:
    """Manages configuration loading from global, project, and environment sources."""

    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "zeroide"
    PROJECT_CONFIG_DIR = ".zeroide"

    def __init__(
        self,
        config_dir: Path | None = None,
        project_dir: Path | None = None,
    ) -> None:
        self._config_dir = config_dir or self.DEFAULT_CONFIG_DIR
        self._project_dir = project_dir or Path.cwd()
        self._config: ZeroideConfig | None = None
        self._loaded_sources: list[str] = []

    @property
    def config(self) -> ZeroideConfig:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    @property
    def config_dir(self) -> Path:
        """Get global config directory."""
        return self._config_dir

    @property
    def project_dir(self) -> Path:
        """Get project directory."""
        return self._project_dir

    @property
    def loaded_sources(self) -> list[str]:
        """Get list of loaded configuration sources."""
        return self._loaded_sources.copy()

    def load(self) -> ZeroideConfig:
        """Load configuration from all sources.

        Priority (higher wins):
        1. Environment overrides (merged on top of config.toml)
        2. config.toml: Project > Global (no merging between the two)

        Raises:
            ConfigError: If a config file is not valid TOML or does not match
                the configuration schema.
        """
        self._loaded_sources = []
        merged: dict[str, Any] = {}

        # Layer 1: config.toml (project takes priority over global, no merge)
        project_config_file = self.get_project_config_file()
        global_config_file = self.get_global_config_file()

        for config_file in (project_config_file, global_config_file):
            if config_file.exists():
                merged = _read_toml(config_file)
                self._loaded_sources.append(str(config_file))
                break

        # Layer 2: Environment overrides (merged)
        env_overrides = self._load_env_overrides()
        if env_overrides:
            merged = _deep_merge(merged, env_overrides)
            self._loaded_sources.append("environment")

        try:
            self._config = ZeroideConfig.model_validate(merged)
        except ValidationError as e:
            source = self._loaded_sources[0] if self._loaded_sources else "defaults"
            raise ConfigError(f"Invalid configuration in {source}: {e}") from e

        logger.debug("Configuration loaded from %s", self._loaded_sources or ["defaults"])
        return self._config

    def reload(self) -> ZeroideConfig:
        """Force reload configuration."""
        self._config = None
        return self.load()

    def _load_env_overrides(self) -> dict[str, Any]:
        """Load settings from environment using pydantic-settings."""
        env = EnvSettings()
        overrides: dict[str, Any] = {}

        # Display
        display: dict[str, Any] = {}
        if env.theme is not None:
            display["theme"] = env.theme
        if env.timestamp_format is not None:
            display["timestamp_format"] = env.timestamp_format
        if display:
            overrides["display"] = display

        # Response
        if env.response_delay is not None:
            overrides["response"] = {"delay": env.response_delay}

        return overrides

    def ensure_config_dir(self) -> None:
        """Create global config directory."""
        self._config_dir.mkdir(parents=True, exist_ok=True)

    def save_default_config(self, force: bool = False) -> Path | None:
        """Save default global configuration.

        Args:
            force: Overwrite an existing file.

        Returns:
            Path written, or None if the file already exists.
        """
        config_file = self.get_global_config_file()
        if config_file.exists() and not force:
            return None

        self.ensure_config_dir()
        config_file.write_text(_load_template("config.toml"))
        return config_file

    def get_global_config_file(self) -> Path:
        """Get path to global config file."""
        return self._config_dir / "config.toml"

    def get_project_config_file(self) -> Path:
        """Get path to project config file."""
        return self._project_dir / self.PROJECT_CONFIG_DIR / "config.toml"


# =============================================================================
# Internal Utilities
# =============================================================================


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file, wrapping parse errors in ConfigError."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_template(name: str) -> str:
    """Load a template file."""
    template_files = resources.files("zeroide_cli").joinpath("templates")
    return template_files.joinpath(name).read_text(encoding="utf-8")


# =============================================================================
# Convenience Functions
# =============================================================================


def load_config(
    config_dir: Path | None = None,
    project_dir: Path | None = None,
) -> ZeroideConfig:
    """Load configuration from all sources.

    Convenience function that creates a ConfigManager and loads config.

    Args:
        config_dir: Optional custom global config directory.
        project_dir: Optional custom project directory.

    Returns:
        Loaded ZeroideConfig.
    """
    manager = ConfigManager(config_dir=config_dir, project_dir=project_dir)
    return manager.load()
