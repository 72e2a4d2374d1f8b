"""Tests for zeroide_cli.themes.registry module."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from zeroide_cli.themes import (
    DEFAULT_DARK,
    DEFAULT_LIGHT,
    FALLBACK_THEME_NAME,
    CustomThemeConfig,
    Theme,
    ThemeColors,
    ThemeKind,
    ThemeRegistry,
    fallback_themes,
    load_builtin_themes,
)

BUILTIN_NAMES = ["Default Dark", "Default Light", "Dracula", "GitHub Dark", "GitHub Light"]


def _colors(primary: str = "red") -> ThemeColors:
    return ThemeColors(
        primary=primary,
        accent="yellow",
        error="red",
        warning="yellow",
        success="green",
        text="white",
        secondary="bright_black",
        border="bright_black",
        input="white",
        selection="cyan",
    )


def _theme(name: str, primary: str = "red") -> Theme:
    return Theme(name=name, colors=_colors(primary))


# =============================================================================
# Built-in Catalog Tests
# =============================================================================


def test_builtin_catalog_order() -> None:
    """Test the packaged catalog has the five built-ins in order."""
    themes = load_builtin_themes()
    assert [t.name for t in themes] == BUILTIN_NAMES
    assert all(t.kind == ThemeKind.BUILT_IN for t in themes)


def test_builtin_themes_define_every_role() -> None:
    """Test every built-in theme defines every required color role."""
    for theme in load_builtin_themes():
        for role in ("primary", "accent", "error", "warning", "success", "text", "secondary", "border", "input", "selection"):
            assert getattr(theme.colors, role)


def test_theme_colors_require_every_role() -> None:
    """Test a theme missing a role is rejected."""
    with pytest.raises(ValidationError):
        ThemeColors(primary="red")  # type: ignore[call-arg]


def test_theme_colors_reject_unknown_color() -> None:
    """Test a color rich cannot parse is rejected."""
    with pytest.raises(ValidationError):
        _colors(primary="gray")


def test_theme_colors_accept_hex_and_names() -> None:
    """Test hex colors and named colors are both accepted."""
    colors = _colors(primary="#1e1e2e")
    assert colors.primary == "#1e1e2e"
    assert ThemeColors(**{**colors.model_dump(), "background": "grey11"}).background == "grey11"


def test_custom_theme_rejects_unknown_gradient() -> None:
    """Test gradient colors are checked like color roles."""
    with pytest.raises(ValidationError):
        CustomThemeConfig(colors=_colors(), gradients=["red", "not-a-color"])


def test_theme_is_immutable() -> None:
    """Test themes cannot be mutated after construction."""
    theme = _theme("Frozen")
    with pytest.raises(ValidationError):
        theme.name = "Other"  # type: ignore[misc]


# =============================================================================
# Initialization Tests
# =============================================================================


def test_default_initialization(registry: ThemeRegistry) -> None:
    """Test the registry registers built-ins and activates Default Dark."""
    assert registry.names() == BUILTIN_NAMES
    active = registry.get_active()
    assert active is not None
    assert active.name == DEFAULT_DARK


def test_default_theme_name() -> None:
    """Test the caller-supplied default is activated."""
    registry = ThemeRegistry(default_theme="Dracula")
    assert registry.get_active().name == "Dracula"  # type: ignore[union-attr]


def test_default_theme_resolver_called_once() -> None:
    """Test a resolver callable supplies the default name."""
    calls: list[int] = []

    def resolver() -> str:
        calls.append(1)
        return DEFAULT_LIGHT

    registry = ThemeRegistry(default_theme=resolver)
    assert registry.get_active().name == DEFAULT_LIGHT  # type: ignore[union-attr]
    assert calls == [1]


def test_unknown_default_falls_back() -> None:
    """Test an unknown default activates the fallback theme."""
    registry = ThemeRegistry(default_theme="Nope")
    assert registry.get_active().name == FALLBACK_THEME_NAME  # type: ignore[union-attr]
    assert registry.default_name == "Nope"


def test_malformed_catalog_uses_fallback_pair() -> None:
    """Test a catalog loader failure yields the minimal light/dark pair."""

    def broken() -> list[Theme]:
        raise ValueError("bad catalog")

    registry = ThemeRegistry(catalog_loader=broken)
    assert registry.names() == [DEFAULT_LIGHT, DEFAULT_DARK]
    assert registry.get_active().name == DEFAULT_DARK  # type: ignore[union-attr]


def test_catalog_without_fallback_name_gets_it() -> None:
    """Test the fallback theme is present even if the catalog omits it."""
    registry = ThemeRegistry(catalog_loader=lambda: [_theme("Only")], default_theme="Missing")
    assert "Only" in registry
    assert FALLBACK_THEME_NAME in registry
    assert registry.get_active().name == FALLBACK_THEME_NAME  # type: ignore[union-attr]


def test_fallback_themes_pair() -> None:
    """Test the hard-coded fallback pair."""
    assert [t.name for t in fallback_themes()] == [DEFAULT_LIGHT, DEFAULT_DARK]


# =============================================================================
# Register / Lookup Tests
# =============================================================================


def test_register_appends(registry: ThemeRegistry) -> None:
    """Test registering a new theme appends it."""
    registry.register(_theme("Custom"))
    assert registry.names()[-1] == "Custom"
    assert len(registry) == 6


def test_register_overwrite_keeps_position(registry: ThemeRegistry) -> None:
    """Test overwriting a name keeps its position and last write wins."""
    replacement = _theme("Dracula", primary="blue")
    registry.register(replacement)

    assert registry.names() == BUILTIN_NAMES
    assert registry.get("Dracula") is replacement


def test_register_overwrite_of_active_updates_active(registry: ThemeRegistry) -> None:
    """Test replacing the active theme keeps the active reference current."""
    replacement = _theme(DEFAULT_DARK, primary="magenta")
    registry.register(replacement)
    assert registry.get_active() is replacement


def test_set_active_known(registry: ThemeRegistry) -> None:
    """Test set_active with a known name."""
    assert registry.set_active("GitHub Light") is True
    assert registry.get_active().name == "GitHub Light"  # type: ignore[union-attr]


def test_set_active_unknown_leaves_state(registry: ThemeRegistry) -> None:
    """Test set_active with an unknown name returns False and changes nothing."""
    before = registry.get_active()
    assert registry.set_active("Unknown") is False
    assert registry.get_active() is before


def test_get_missing_returns_none(registry: ThemeRegistry) -> None:
    """Test get with an unknown name returns None."""
    assert registry.get("Unknown") is None


def test_list_is_a_copy(registry: ThemeRegistry) -> None:
    """Test list() returns a new list each time."""
    themes = registry.list()
    themes.clear()
    assert len(registry.list()) == 5


# =============================================================================
# Custom Theme Tests
# =============================================================================


def test_custom_themes_at_construction() -> None:
    """Test custom themes are registered after the built-ins."""
    custom = {"Ocean": CustomThemeConfig(colors=_colors("blue"), preview="Deep blue")}
    registry = ThemeRegistry(default_theme="Ocean", custom_themes=custom)

    assert registry.names() == [*BUILTIN_NAMES, "Ocean"]
    ocean = registry.get_active()
    assert ocean is not None
    assert ocean.name == "Ocean"
    assert ocean.kind == ThemeKind.CUSTOM
    assert ocean.preview == "Deep blue"


def test_load_custom(registry: ThemeRegistry) -> None:
    """Test load_custom registers each entry as a custom theme."""
    registry.load_custom({
        "A": CustomThemeConfig(colors=_colors(), gradients=["red", "blue"]),
        "B": CustomThemeConfig(colors=_colors()),
    })
    assert registry.names()[-2:] == ["A", "B"]
    assert registry.get("A").gradients == ("red", "blue")  # type: ignore[union-attr]


# =============================================================================
# Reset Tests
# =============================================================================


def test_reset_restores_initial_state() -> None:
    """Test reset re-runs initialization with the same defaults."""
    custom = {"Ocean": CustomThemeConfig(colors=_colors("blue"))}
    registry = ThemeRegistry(default_theme="Dracula", custom_themes=custom)
    registry.register(_theme("Temp"))
    registry.set_active("GitHub Dark")

    registry.reset()

    assert registry.names() == [*BUILTIN_NAMES, "Ocean"]
    assert registry.get_active().name == "Dracula"  # type: ignore[union-attr]


def test_reset_with_new_default(registry: ThemeRegistry) -> None:
    """Test reset can change the default theme."""
    registry.reset(default_theme=DEFAULT_LIGHT)
    assert registry.get_active().name == DEFAULT_LIGHT  # type: ignore[union-attr]
