"""Theme selector controller.

Moving the selection is a live preview only: the registry is touched solely
by commit() and cancel().
"""

from __future__ import annotations

from zeroide_cli.app.keys import Direction
from zeroide_cli.themes import Theme, ThemeRegistry


class ThemeSelector:
    """Navigation state for choosing a theme.

    The theme list is snapshotted from the registry when the selector opens,
    together with the name of the theme that was active at that moment.
    """

    def __init__(self) -> None:
        self._themes: list[Theme] = []
        self._selected_index = 0
        self._previous_active_name: str | None = None
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def themes(self) -> list[Theme]:
        """Themes captured at open time."""
        return list(self._themes)

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def previous_active_name(self) -> str | None:
        """Name of the theme active before the selector opened."""
        return self._previous_active_name

    @property
    def preview_theme(self) -> Theme | None:
        """Theme under the cursor, used for the live preview."""
        if not self._themes:
            return None
        return self._themes[self._selected_index]

    def open(self, registry: ThemeRegistry) -> None:
        """Capture the registry state and select the active theme.

        Args:
            registry: Registry to snapshot.
        """
        self._themes = registry.list()
        active = registry.get_active()
        self._previous_active_name = active.name if active else None
        self._selected_index = 0
        if active is not None:
            for index, theme in enumerate(self._themes):
                if theme.name == active.name:
                    self._selected_index = index
                    break
        self._is_open = True

    def move_selection(self, direction: Direction) -> None:
        """Move the cursor one theme, wrapping at either end."""
        count = len(self._themes)
        if count == 0:
            return
        step = 1 if direction == Direction.DOWN else -1
        self._selected_index = (self._selected_index + step) % count

    def commit(self, registry: ThemeRegistry) -> Theme | None:
        """Activate the selected theme and close.

        Args:
            registry: Registry to update.

        Returns:
            The committed theme, or None if there was nothing to select.
        """
        theme = self.preview_theme
        if theme is not None:
            registry.set_active(theme.name)
        self._close()
        return theme

    def cancel(self, registry: ThemeRegistry) -> None:
        """Restore the theme that was active at open time and close."""
        if self._previous_active_name is not None:
            registry.set_active(self._previous_active_name)
        self._close()

    def _close(self) -> None:
        self._themes = []
        self._selected_index = 0
        self._previous_active_name = None
        self._is_open = False
