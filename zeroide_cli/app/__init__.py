"""Interaction core.

This module provides the session components:
- SessionStateMachine: Modal key handling, message log and response task
- SessionMode: Modal interaction context
- CommandCatalog: Slash command catalog
- CommandPalette: Palette selection and scroll window
- ThemeSelector: Theme navigation with live preview
"""

from __future__ import annotations

from zeroide_cli.app.commands import (
    BUILTIN_COMMANDS,
    DEFAULT_COMMANDS,
    Command,
    CommandCatalog,
    CommandHandler,
    create_default_catalog,
)
from zeroide_cli.app.keys import Direction, Key, KeyEvent
from zeroide_cli.app.messages import Message, MessageLog, MessageRole
from zeroide_cli.app.palette import VISIBLE_WINDOW_SIZE, CommandPalette
from zeroide_cli.app.state import VALID_TRANSITIONS, SessionMode, SessionSnapshot, SessionStateMachine
from zeroide_cli.app.theme_selector import ThemeSelector

__all__ = [
    "BUILTIN_COMMANDS",
    "DEFAULT_COMMANDS",
    "VALID_TRANSITIONS",
    "VISIBLE_WINDOW_SIZE",
    "Command",
    "CommandCatalog",
    "CommandHandler",
    "CommandPalette",
    "Direction",
    "Key",
    "KeyEvent",
    "Message",
    "MessageLog",
    "MessageRole",
    "SessionMode",
    "SessionSnapshot",
    "SessionStateMachine",
    "ThemeSelector",
    "create_default_catalog",
]
