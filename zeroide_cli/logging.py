"""Logging configuration for zeroide-cli.

Before the TUI starts, log records go to stderr. Once the full-screen TUI is
running, stderr output would corrupt the display, so all output is redirected
to a queue-based handler whose LogEvents the TUI consumes.

Key components:
- QueueHandler: Logging handler that emits LogEvents to a queue
- configure_logging(): stderr logging for CLI startup
- configure_tui_logging(): redirect the zeroide_cli logger to a queue

Usage:
    from zeroide_cli.logging import configure_tui_logging

    log_queue = asyncio.Queue()
    configure_tui_logging(log_queue)
"""

from __future__ import annotations

import logging
from asyncio import Queue

from zeroide_cli.events import LogEvent

TUI_LOGGER_NAME = "zeroide_cli"

_initialized = False
_log_queue: Queue | None = None


# -----------------------------------------------------------------------------
# Queue Handler
# -----------------------------------------------------------------------------


class QueueHandler(logging.Handler):
    """Logging handler that emits LogEvents to a queue.

    Formats log records and puts them into an asyncio Queue as LogEvent
    instances for display by TUI components.
    """

    def __init__(self, queue: Queue, level: int = logging.DEBUG) -> None:
        """Initialize the queue handler.

        Args:
            queue: Asyncio queue to emit events to.
            level: Minimum log level to handle.
        """
        super().__init__(level)
        self._queue = queue

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record as a LogEvent.

        Args:
            record: The log record to emit.
        """
        try:
            msg = self.format(record)
            event = LogEvent(
                event_id=f"log-{record.created:.0f}-{record.lineno}",
                level=record.levelname,
                logger_name=record.name,
                message=msg,
                func_name=record.funcName,
                line_no=record.lineno,
            )
            self._queue.put_nowait(event)
        except Exception:
            self.handleError(record)


# -----------------------------------------------------------------------------
# Configuration Functions
# -----------------------------------------------------------------------------


def configure_tui_logging(
    queue: Queue,
    level: int = logging.INFO,
) -> None:
    """Configure logging for TUI mode.

    Replaces the zeroide_cli logger's handlers with a QueueHandler so nothing
    is written to stderr while the TUI owns the terminal. Subsequent calls are
    no-ops until reset_logging() is called.

    Args:
        queue: Asyncio queue to receive LogEvents.
        level: Minimum log level to capture (default: INFO).
    """
    global _initialized, _log_queue

    if _initialized:
        return

    _log_queue = queue

    logger = logging.getLogger(TUI_LOGGER_NAME)
    logger.handlers.clear()

    handler = QueueHandler(queue, level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False

    _initialized = True


def reset_logging() -> None:
    """Reset logging configuration.

    Useful for tests or when the TUI exits and stderr is usable again.
    """
    global _initialized, _log_queue

    logging.getLogger(TUI_LOGGER_NAME).handlers.clear()

    _initialized = False
    _log_queue = None


def configure_logging(verbose: bool = False) -> None:
    """Configure basic stderr logging for CLI startup.

    Used before the TUI is initialized. Once the TUI starts, call
    configure_tui_logging() to switch to queue mode.

    Args:
        verbose: If True, set DEBUG level; otherwise INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(TUI_LOGGER_NAME)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance under the zeroide_cli namespace.
    """
    if not name.startswith(TUI_LOGGER_NAME):
        name = f"{TUI_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
