"""Command palette controller.

Computes the selection and visible window over the command catalog. Searching
moves the highlight to the first matching command; it never hides rows.
"""

from __future__ import annotations

from zeroide_cli.app.commands import Command, CommandCatalog
from zeroide_cli.app.keys import Direction

VISIBLE_WINDOW_SIZE = 5
NO_SELECTION = -1


class CommandPalette:
    """Selection and scroll state for the command palette.

    Invariants:
    - selected_index is in [-1, count - 1]; -1 means no command matches.
    - scroll_offset is in [0, max(0, count - visible_window_size)].
    - When selected_index >= 0 the selected row is inside the visible window.
    """

    def __init__(self, catalog: CommandCatalog, visible_window_size: int = VISIBLE_WINDOW_SIZE) -> None:
        """Initialize palette controller.

        Args:
            catalog: Commands to choose from.
            visible_window_size: Number of rows shown at once.
        """
        if visible_window_size < 1:
            raise ValueError("visible_window_size must be at least 1")
        self._catalog = catalog
        self._window = visible_window_size
        self._query = ""
        self._selected_index = 0
        self._scroll_offset = 0

    @property
    def commands(self) -> list[Command]:
        """All commands, unfiltered, in display order."""
        return self._catalog.list_commands()

    @property
    def count(self) -> int:
        return len(self._catalog)

    @property
    def query(self) -> str:
        return self._query

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def scroll_offset(self) -> int:
        return self._scroll_offset

    @property
    def visible_window_size(self) -> int:
        return self._window

    @property
    def max_scroll_offset(self) -> int:
        """Largest valid scroll offset."""
        return max(0, self.count - self._window)

    @property
    def selected_command(self) -> Command | None:
        """Currently highlighted command, None if nothing matches."""
        if 0 <= self._selected_index < self.count:
            return self.commands[self._selected_index]
        return None

    def open(self) -> None:
        """Reset to an empty query with the first command selected."""
        self._query = ""
        self._selected_index = 0 if self.count else NO_SELECTION
        self._scroll_offset = 0

    def close(self) -> None:
        """Discard palette sub-state."""
        self.open()

    def set_query(self, text: str) -> None:
        """Select the first command matching the search text.

        A command matches when its name or description contains the text,
        case-insensitively.

        Args:
            text: Search text (the buffer after the leading "/").
        """
        self._query = text
        needle = text.lower()
        self._selected_index = NO_SELECTION
        for index, command in enumerate(self.commands):
            if needle in command.name.lower() or needle in command.description.lower():
                self._selected_index = index
                break
        self._ensure_visible()

    def move_selection(self, direction: Direction) -> None:
        """Move the highlight one row, wrapping at either end.

        Args:
            direction: Direction.UP or Direction.DOWN.
        """
        count = self.count
        if count == 0:
            self._selected_index = NO_SELECTION
            self._scroll_offset = 0
            return

        current = self._selected_index
        if direction == Direction.DOWN:
            self._selected_index = 0 if current < 0 or current >= count - 1 else current + 1
        else:
            self._selected_index = count - 1 if current <= 0 else current - 1
        self._ensure_visible()

    def visible_rows(self) -> list[Command]:
        """Commands inside the visible window, starting at scroll_offset."""
        return self.commands[self._scroll_offset : self._scroll_offset + self._window]

    def confirm(self) -> Command | None:
        """Get the command to run, None if nothing is selected."""
        return self.selected_command

    def _ensure_visible(self) -> None:
        """Scroll so the selected row is visible, then clamp the offset."""
        selected = self._selected_index
        offset = self._scroll_offset
        if selected >= 0:
            if selected < offset:
                offset = selected
            elif selected >= offset + self._window:
                offset = selected - self._window + 1
        self._scroll_offset = max(0, min(offset, self.max_scroll_offset))
