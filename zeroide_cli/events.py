"""Session event types for zeroide-cli.

Events are plain dataclasses emitted by the session state machine (and the
logging queue handler) so the presentation layer can react to state changes
without reaching into session internals.

All events extend SessionEvent, which carries a correlation id and a
creation timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class SessionEvent:
    """Base class for session events.

    Attributes:
        event_id: Unique identifier for the event.
        timestamp: When the event was created.
    """

    event_id: str
    timestamp: datetime = field(default_factory=datetime.now)


# -----------------------------------------------------------------------------
# State Events
# -----------------------------------------------------------------------------


@dataclass
class ModeChangedEvent(SessionEvent):
    """Emitted when the session moves between modal modes.

    Attributes:
        old_mode: Mode value before the transition.
        new_mode: Mode value after the transition.
    """

    old_mode: str = ""
    new_mode: str = ""


@dataclass
class MessageAppendedEvent(SessionEvent):
    """Emitted when a message is appended to the message log.

    Attributes:
        role: Role of the appended message.
        content: Message text.
    """

    role: str = ""
    content: str = ""


@dataclass
class ThemeChangedEvent(SessionEvent):
    """Emitted when a theme selection is committed.

    Attributes:
        old_theme: Name of the previously active theme.
        new_theme: Name of the newly active theme.
    """

    old_theme: str = ""
    new_theme: str = ""


# -----------------------------------------------------------------------------
# Log Events
# -----------------------------------------------------------------------------


@dataclass
class LogEvent(SessionEvent):
    """Log message event for TUI display.

    Emitted by QueueHandler when a log record is produced.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        logger_name: Name of the logger that produced the message.
        message: Formatted log message.
        func_name: Function name where log was called.
        line_no: Line number where log was called.
    """

    level: str = "INFO"
    logger_name: str = ""
    message: str = ""
    func_name: str = ""
    line_no: int = 0
