"""Theme registry.

Owns the catalog of named themes and the currently active one. One registry
is constructed by the session owner and passed explicitly to everything that
needs it; there is no module-level instance.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from importlib import resources

from pydantic import ValidationError

from zeroide_cli.logging import get_logger
from zeroide_cli.themes.models import CustomThemeConfig, Theme, ThemeCatalog, ThemeColors, ThemeKind

logger = get_logger(__name__)

DEFAULT_DARK = "Default Dark"
DEFAULT_LIGHT = "Default Light"

FALLBACK_THEME_NAME = DEFAULT_DARK
"""Built-in theme guaranteed to exist after initialization."""

BUILTIN_CATALOG_FILE = "builtin_themes.json"


def load_builtin_themes() -> list[Theme]:
    """Load the packaged built-in theme catalog.

    Returns:
        Built-in themes in catalog order.

    Raises:
        OSError: If the catalog file cannot be read.
        ValidationError: If the catalog does not match the theme schema.
    """
    data = resources.files("zeroide_cli.themes").joinpath(BUILTIN_CATALOG_FILE).read_text(encoding="utf-8")
    catalog = ThemeCatalog.model_validate_json(data)
    return [theme.model_copy(update={"kind": ThemeKind.BUILT_IN}) for theme in catalog.themes]


def fallback_themes() -> list[Theme]:
    """Minimal hard-coded light and dark pair used when the catalog is unusable."""
    light = Theme(
        name=DEFAULT_LIGHT,
        kind=ThemeKind.BUILT_IN,
        colors=ThemeColors(
            primary="blue",
            accent="magenta",
            error="red",
            warning="yellow",
            success="green",
            text="black",
            secondary="bright_black",
            border="bright_black",
            input="black",
            selection="blue",
        ),
        preview="Default light theme",
    )
    dark = Theme(
        name=DEFAULT_DARK,
        kind=ThemeKind.BUILT_IN,
        colors=ThemeColors(
            primary="cyan",
            accent="yellow",
            error="red",
            warning="yellow",
            success="green",
            text="white",
            secondary="bright_black",
            border="bright_black",
            input="white",
            selection="cyan",
        ),
        preview="Default dark theme",
    )
    return [light, dark]


class ThemeRegistry:
    """Catalog of named themes plus the active theme.

    Themes are listed in registration order. Registering a name that already
    exists replaces the theme but keeps its position.

    Lookup misses never raise: set_active() returns False and get() returns
    None, leaving the caller to decide what (if anything) to show the user.
    """

    def __init__(
        self,
        default_theme: str | Callable[[], str] = FALLBACK_THEME_NAME,
        custom_themes: Mapping[str, CustomThemeConfig] | None = None,
        catalog_loader: Callable[[], list[Theme]] = load_builtin_themes,
    ) -> None:
        """Initialize the registry.

        Args:
            default_theme: Name of the theme to activate, or a resolver called
                once to produce it (e.g. system theme detection).
            custom_themes: Custom theme definitions registered after the
                built-ins.
            catalog_loader: Source of the built-in catalog.
        """
        self._themes: dict[str, Theme] = {}
        self._active: Theme | None = None
        self._catalog_loader = catalog_loader
        self._custom_themes: dict[str, CustomThemeConfig] = dict(custom_themes or {})
        self._default_name = default_theme() if callable(default_theme) else default_theme
        self._initialize()

    @property
    def default_name(self) -> str:
        """Theme name requested at initialization."""
        return self._default_name

    def _initialize(self) -> None:
        """Register built-ins and custom themes, then activate the default."""
        try:
            builtins = self._catalog_loader()
        except (OSError, ValidationError, ValueError) as e:
            logger.warning("Failed to load built-in themes, using fallback: %s", e)
            builtins = fallback_themes()

        for theme in builtins:
            self.register(theme)
        # Both the catalog and the fallback pair must provide the fallback name
        if FALLBACK_THEME_NAME not in self._themes:
            logger.warning("Built-in catalog lacks %r, adding fallback themes", FALLBACK_THEME_NAME)
            for theme in fallback_themes():
                if theme.name not in self._themes:
                    self.register(theme)

        self.load_custom(self._custom_themes)

        if not self.set_active(self._default_name):
            logger.debug("Theme %r not found, falling back to %r", self._default_name, FALLBACK_THEME_NAME)
            self.set_active(FALLBACK_THEME_NAME)

    def register(self, theme: Theme) -> None:
        """Insert or replace a theme keyed by its name.

        Args:
            theme: Theme to register.
        """
        self._themes[theme.name] = theme
        # Keep the active reference pointing at the current object for that name
        if self._active is not None and self._active.name == theme.name:
            self._active = theme

    def load_custom(self, custom_themes: Mapping[str, CustomThemeConfig]) -> None:
        """Register custom theme definitions.

        Args:
            custom_themes: Mapping of theme name to definition.
        """
        for name, config in custom_themes.items():
            self.register(Theme.from_config(name, config, kind=ThemeKind.CUSTOM))

    def set_active(self, name: str) -> bool:
        """Activate a theme by name.

        Args:
            name: Theme name.

        Returns:
            True if the theme exists and is now active, False otherwise
            (state unchanged).
        """
        theme = self._themes.get(name)
        if theme is None:
            return False
        self._active = theme
        return True

    def get_active(self) -> Theme | None:
        """Get the active theme (None only before initialization)."""
        return self._active

    def get(self, name: str) -> Theme | None:
        """Get a theme by name."""
        return self._themes.get(name)

    def list(self) -> list[Theme]:
        """Get all themes in registration order."""
        return list(self._themes.values())

    def names(self) -> list[str]:
        """Get all theme names in registration order."""
        return list(self._themes.keys())

    def reset(self, default_theme: str | None = None) -> None:
        """Clear all themes and re-run initialization.

        Args:
            default_theme: New default theme name. Reuses the name from
                construction when omitted.
        """
        if default_theme is not None:
            self._default_name = default_theme
        self._themes.clear()
        self._active = None
        self._initialize()

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    def __len__(self) -> int:
        return len(self._themes)
