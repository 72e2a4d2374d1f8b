"""Chat message log."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class MessageRole(str, Enum):
    """Who produced a message."""

    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    STATUS = "status"


@dataclass(frozen=True)
class Message:
    """A single chat entry.

    Attributes:
        role: Message author.
        content: Message text.
        timestamp: Formatted display time, if any.
    """

    role: MessageRole
    content: str
    timestamp: str | None = None


class MessageLog:
    """Ordered sequence of chat messages.

    Messages are only ever appended; the log as a whole can be emptied by
    clear().
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def append(self, message: Message) -> None:
        """Append a message to the end of the log."""
        self._messages.append(message)

    def clear(self) -> None:
        """Remove all messages."""
        self._messages.clear()

    @property
    def messages(self) -> tuple[Message, ...]:
        """Immutable view of all messages in order."""
        return tuple(self._messages)

    @property
    def last(self) -> Message | None:
        """Most recent message, if any."""
        return self._messages[-1] if self._messages else None

    def by_role(self, role: MessageRole) -> list[Message]:
        """Messages with the given role, in order."""
        return [m for m in self._messages if m.role == role]

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
