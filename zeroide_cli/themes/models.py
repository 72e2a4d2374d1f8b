"""Theme data models.

A theme is a named, immutable bundle of color roles consumed by every
rendered surface. Color values are any color name or hex string understood by
rich (e.g. ``"cyan"``, ``"#1e1e2e"``).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from rich.color import Color, ColorParseError


def _parse_color(value: str) -> None:
    """Reject colors rich cannot paint."""
    try:
        Color.parse(value)
    except ColorParseError as e:
        raise ValueError(f"invalid color {value!r}: {e}") from e


class ThemeKind(str, Enum):
    """Where a theme comes from."""

    BUILT_IN = "built-in"
    CUSTOM = "custom"


class ThemeColors(BaseModel):
    """Color roles every theme must define."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    primary: str
    accent: str
    error: str
    warning: str
    success: str
    text: str
    secondary: str
    border: str
    input: str
    selection: str
    background: str | None = None
    """Optional background color. None leaves the terminal default."""

    @field_validator("*")
    @classmethod
    def check_color(cls, value: str | None) -> str | None:
        if value is not None:
            _parse_color(value)
        return value


class CustomThemeConfig(BaseModel):
    """Theme definition without identity, as found in configuration files."""

    model_config = ConfigDict(frozen=True)

    colors: ThemeColors
    gradients: list[str] | None = None
    preview: str | None = None

    @field_validator("gradients")
    @classmethod
    def check_gradients(cls, value: list[str] | None) -> list[str] | None:
        for color in value or []:
            _parse_color(color)
        return value


class Theme(BaseModel):
    """A named theme."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    kind: ThemeKind = Field(default=ThemeKind.CUSTOM, alias="type")
    colors: ThemeColors
    gradients: tuple[str, ...] | None = None
    preview: str | None = None

    @field_validator("gradients")
    @classmethod
    def check_gradients(cls, value: tuple[str, ...] | None) -> tuple[str, ...] | None:
        for color in value or ():
            _parse_color(color)
        return value

    @classmethod
    def from_config(
        cls,
        name: str,
        config: CustomThemeConfig,
        kind: ThemeKind = ThemeKind.CUSTOM,
    ) -> Theme:
        """Build a theme from a nameless definition.

        Args:
            name: Theme name (registry key).
            config: Colors and optional extras.
            kind: Theme kind, custom unless stated otherwise.

        Returns:
            New Theme instance.
        """
        return cls(
            name=name,
            kind=kind,
            colors=config.colors,
            gradients=tuple(config.gradients) if config.gradients is not None else None,
            preview=config.preview,
        )


class ThemeCatalog(BaseModel):
    """Shape of the packaged built-in theme catalog."""

    themes: list[Theme]
