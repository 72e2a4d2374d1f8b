"""System theme detection.

Guesses whether the terminal has a dark or light background so the registry
can start with a matching built-in theme. Detection order:

1. macOS appearance setting (``defaults read -g AppleInterfaceStyle``)
2. ``COLORFGBG`` background color index (0-7 dark, 8-15 light)
3. ``TERM`` containing ``dark`` or ``256color``
4. Dark
"""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Callable, Mapping
from typing import Literal

from zeroide_cli.logging import get_logger
from zeroide_cli.themes.registry import DEFAULT_DARK, DEFAULT_LIGHT

logger = get_logger(__name__)

ThemePreference = Literal["dark", "light"]


def _macos_appearance() -> str | None:
    """Read the macOS interface style, None if unavailable."""
    try:
        result = subprocess.run(
            ["defaults", "read", "-g", "AppleInterfaceStyle"],  # noqa: S607
            capture_output=True,
            text=True,
            timeout=2,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("macOS appearance probe failed: %s", e)
        return None
    # The key is absent (non-zero exit) in light mode
    return result.stdout.strip() or "Light"


def detect_system_theme(
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
    macos_probe: Callable[[], str | None] = _macos_appearance,
) -> ThemePreference:
    """Detect the terminal's background preference.

    Args:
        environ: Environment to inspect. Defaults to os.environ.
        platform: Platform name. Defaults to sys.platform.
        macos_probe: Returns the macOS interface style ("Dark"/"Light").

    Returns:
        "dark" or "light".
    """
    env = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform

    if platform == "darwin" and macos_probe() == "Dark":
        return "dark"

    colorfgbg = env.get("COLORFGBG")
    if colorfgbg:
        parts = colorfgbg.split(";")
        if len(parts) >= 2 and parts[1]:
            try:
                bg = int(parts[1])
            except ValueError:
                bg = -1
            if 0 <= bg <= 7:
                return "dark"
            if 8 <= bg <= 15:
                return "light"

    term = env.get("TERM", "")
    if "dark" in term or "256color" in term:
        return "dark"

    return "dark"


def default_theme_name(preference: ThemePreference) -> str:
    """Map a background preference to a built-in theme name."""
    return DEFAULT_DARK if preference == "dark" else DEFAULT_LIGHT


def resolve_default_theme(
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> str:
    """Default-theme resolver backed by system detection."""
    return default_theme_name(detect_system_theme(environ, platform))
