"""Theme models, registry and system theme detection."""

from __future__ import annotations

from zeroide_cli.themes.detect import default_theme_name, detect_system_theme, resolve_default_theme
from zeroide_cli.themes.models import CustomThemeConfig, Theme, ThemeColors, ThemeKind
from zeroide_cli.themes.registry import (
    DEFAULT_DARK,
    DEFAULT_LIGHT,
    FALLBACK_THEME_NAME,
    ThemeRegistry,
    fallback_themes,
    load_builtin_themes,
)

__all__ = [
    "DEFAULT_DARK",
    "DEFAULT_LIGHT",
    "FALLBACK_THEME_NAME",
    "CustomThemeConfig",
    "Theme",
    "ThemeColors",
    "ThemeKind",
    "ThemeRegistry",
    "default_theme_name",
    "detect_system_theme",
    "fallback_themes",
    "load_builtin_themes",
    "resolve_default_theme",
]
