"""Slash command catalog.

The catalog is static, ordered data: each command is a slash-prefixed name
plus a one-line description shown in the command palette. Behavior lives in
the session state machine (built-in commands) or in handlers registered by
the host application.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

HELP = "/help"
SELECT_THEME = "/select-theme"
EXIT = "/exit"
CLEAR = "/clear"
STATUS = "/status"
VERSION = "/version"
CONFIG = "/config"
ABOUT = "/about"

CommandHandler = Callable[[], str | None]
"""Host-supplied behavior for a catalog command; returned text becomes a status message."""


@dataclass(frozen=True)
class Command:
    """A slash command."""

    name: str
    description: str = ""


class CommandCatalog:
    """Ordered collection of slash commands.

    Registering an existing name replaces the description and keeps the
    command's position in the list.
    """

    def __init__(self, commands: list[Command] | None = None) -> None:
        """Initialize command catalog.

        Args:
            commands: Initial commands in display order.
        """
        self._commands: dict[str, Command] = {}
        for command in commands or []:
            self._commands[command.name] = command

    def register(self, name: str, description: str = "") -> Command:
        """Register a command.

        Args:
            name: Command name. A leading "/" is added if missing.
            description: Help text for the command.

        Returns:
            The registered command.
        """
        if not name.startswith("/"):
            name = f"/{name}"
        command = Command(name=name, description=description)
        self._commands[name] = command
        return command

    def get(self, name: str) -> Command | None:
        """Get a command by name (with or without the leading "/")."""
        if not name.startswith("/"):
            name = f"/{name}"
        return self._commands.get(name)

    def list_commands(self) -> list[Command]:
        """Get all commands in display order."""
        return list(self._commands.values())

    def __iter__(self) -> Iterator[Command]:
        return iter(self.list_commands())

    def __len__(self) -> int:
        return len(self._commands)


DEFAULT_COMMANDS: tuple[Command, ...] = (
    Command(HELP, "Show detailed help and documentation"),
    Command(SELECT_THEME, "Choose a different theme"),
    Command(EXIT, "Exit the application"),
    Command(CLEAR, "Clear chat history"),
    Command(STATUS, "Show application status"),
    Command(VERSION, "Show version information"),
    Command(CONFIG, "Show configuration"),
    Command(ABOUT, "About ZeroIDE CLI"),
)

# Commands whose behavior is defined by the session itself
BUILTIN_COMMANDS = frozenset({HELP, SELECT_THEME, EXIT, CLEAR})


def create_default_catalog() -> CommandCatalog:
    """Create a catalog with the default command set."""
    return CommandCatalog(list(DEFAULT_COMMANDS))
