"""Key events consumed by the session state machine.

The presentation layer translates raw terminal key presses into KeyEvent
values so the state machine never depends on a terminal library.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Key(str, Enum):
    """Logical key kinds."""

    CHAR = "char"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    CTRL_C = "c-c"


class Direction(str, Enum):
    """Selection movement direction for list controllers."""

    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class KeyEvent:
    """A single key press.

    Attributes:
        key: Logical key kind.
        char: The typed character for Key.CHAR, empty otherwise.
    """

    key: Key
    char: str = ""

    @classmethod
    def char_key(cls, char: str) -> KeyEvent:
        """Create a printable character key event."""
        return cls(Key.CHAR, char)

    @property
    def is_printable(self) -> bool:
        """True for a single printable character."""
        return self.key == Key.CHAR and len(self.char) == 1 and self.char.isprintable()

    @property
    def direction(self) -> Direction | None:
        """Selection direction for arrow keys, None otherwise."""
        if self.key == Key.UP:
            return Direction.UP
        if self.key == Key.DOWN:
            return Direction.DOWN
        return None


ENTER = KeyEvent(Key.ENTER)
ESCAPE = KeyEvent(Key.ESCAPE)
BACKSPACE = KeyEvent(Key.BACKSPACE)
UP = KeyEvent(Key.UP)
DOWN = KeyEvent(Key.DOWN)
CTRL_C = KeyEvent(Key.CTRL_C)
