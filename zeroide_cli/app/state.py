"""Session state machine.

Owns the modal mode, the input buffer, the message log and the in-flight
response task, and interprets key events one at a time. Every key is handled
synchronously to completion; the only asynchronous work is the response
generator, which runs as a cancellable asyncio task on the same event loop.
"""

from __future__ import annotations

import asyncio
import contextlib
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from zeroide_cli.app.commands import (
    CLEAR,
    EXIT,
    HELP,
    SELECT_THEME,
    Command,
    CommandCatalog,
    CommandHandler,
    create_default_catalog,
)
from zeroide_cli.app.keys import Key, KeyEvent
from zeroide_cli.app.messages import Message, MessageLog, MessageRole
from zeroide_cli.app.palette import CommandPalette
from zeroide_cli.app.theme_selector import ThemeSelector
from zeroide_cli.events import MessageAppendedEvent, ModeChangedEvent, SessionEvent, ThemeChangedEvent
from zeroide_cli.logging import get_logger
from zeroide_cli.responder import EchoResponder, ResponseGenerator
from zeroide_cli.themes import Theme, ThemeRegistry

logger = get_logger(__name__)

DEFAULT_TIMESTAMP_FORMAT = "%H:%M"

PENDING_REJECTED_TEXT = "A response is still pending (esc to cancel)"
RESPONSE_CANCELLED_TEXT = "Response cancelled"


class SessionMode(str, Enum):
    """Modal interaction context. Exactly one is active at a time."""

    NORMAL = "normal"
    HELP = "help"
    COMMAND_PALETTE = "command_palette"
    THEME_SELECTOR = "theme_selector"
    EXIT_CONFIRM = "exit_confirm"


# Valid mode transitions. The palette and theme selector are only entered
# from NORMAL; leaving HELP or the palette for them goes through NORMAL.
VALID_TRANSITIONS: dict[SessionMode, set[SessionMode]] = {
    SessionMode.NORMAL: {SessionMode.HELP, SessionMode.COMMAND_PALETTE, SessionMode.THEME_SELECTOR, SessionMode.EXIT_CONFIRM},
    SessionMode.HELP: {SessionMode.NORMAL, SessionMode.EXIT_CONFIRM},
    SessionMode.COMMAND_PALETTE: {SessionMode.NORMAL, SessionMode.EXIT_CONFIRM},
    SessionMode.THEME_SELECTOR: {SessionMode.NORMAL},
    SessionMode.EXIT_CONFIRM: {SessionMode.NORMAL},
}


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session for the presentation layer."""

    mode: SessionMode
    buffer: str
    is_pending: bool
    terminated: bool
    messages: tuple[Message, ...]
    theme: Theme | None
    """Theme to paint with: the live preview while selecting, else the active theme."""
    palette_rows: tuple[Command, ...] = ()
    palette_selected_index: int = -1
    palette_scroll_offset: int = 0
    selector_themes: tuple[Theme, ...] = ()
    selector_index: int = 0
    active_theme_name: str | None = None
    """Name of the theme committed in the registry."""


class SessionStateMachine:
    """Keystroke-driven chat session.

    Escape closes the innermost overlay first (exit confirmation, help,
    command palette, theme selector), then cancels a pending response, then
    clears the input buffer. It never ends the session; only the exit
    confirmation and the /exit command do.
    """

    def __init__(
        self,
        registry: ThemeRegistry,
        response_generator: ResponseGenerator | None = None,
        catalog: CommandCatalog | None = None,
        command_handlers: Mapping[str, CommandHandler] | None = None,
        clock: Callable[[], datetime] = datetime.now,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        event_sink: Callable[[SessionEvent], None] | None = None,
    ) -> None:
        """Initialize the session in NORMAL mode with an empty buffer and log.

        Args:
            registry: Theme registry owned by this session.
            response_generator: Produces the assistant reply for a message.
            catalog: Commands offered by the palette.
            command_handlers: Behavior for catalog commands the session does
                not implement itself, keyed by command name.
            clock: Source of message timestamps.
            timestamp_format: strftime format for message timestamps.
            event_sink: Receives SessionEvents as state changes.
        """
        self._registry = registry
        self._response_generator = response_generator or EchoResponder()
        self._catalog = catalog or create_default_catalog()
        self._command_handlers: dict[str, CommandHandler] = dict(command_handlers or {})
        self._clock = clock
        self._timestamp_format = timestamp_format
        self._event_sink = event_sink

        self._mode = SessionMode.NORMAL
        self._buffer = ""
        self._log = MessageLog()
        self._palette = CommandPalette(self._catalog)
        self._selector = ThemeSelector()
        self._response_task: asyncio.Task[None] | None = None
        self._terminated = False

        self._observers: list[Callable[[SessionMode, SessionMode], None]] = []
        self._change_listeners: list[Callable[[], None]] = []

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def mode(self) -> SessionMode:
        """Current modal mode."""
        return self._mode

    @property
    def buffer(self) -> str:
        """Text currently typed in the input box."""
        return self._buffer

    @property
    def messages(self) -> MessageLog:
        return self._log

    @property
    def registry(self) -> ThemeRegistry:
        return self._registry

    @property
    def catalog(self) -> CommandCatalog:
        return self._catalog

    @property
    def palette(self) -> CommandPalette:
        return self._palette

    @property
    def theme_selector(self) -> ThemeSelector:
        return self._selector

    @property
    def is_pending(self) -> bool:
        """True while an assistant response is being generated."""
        return self._response_task is not None

    @property
    def terminated(self) -> bool:
        """True once the user has confirmed exit."""
        return self._terminated

    @property
    def display_theme(self) -> Theme | None:
        """Theme the presentation layer should paint with."""
        if self._mode == SessionMode.THEME_SELECTOR and self._selector.preview_theme is not None:
            return self._selector.preview_theme
        return self._registry.get_active()

    # =========================================================================
    # Observers
    # =========================================================================

    def add_observer(self, callback: Callable[[SessionMode, SessionMode], None]) -> None:
        """Add mode change observer.

        Args:
            callback: Function called with (old_mode, new_mode).
        """
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[SessionMode, SessionMode], None]) -> None:
        """Remove mode change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def add_change_listener(self, callback: Callable[[], None]) -> None:
        """Add a listener called after every state update (e.g. to repaint)."""
        self._change_listeners.append(callback)

    def register_command_handler(self, name: str, handler: CommandHandler, description: str = "") -> None:
        """Attach behavior to a command, adding it to the catalog if missing.

        Args:
            name: Command name, with or without the leading "/".
            handler: Callable returning status text (or None for no message).
            description: Palette description for a newly added command.
        """
        command = self._catalog.get(name) or self._catalog.register(name, description)
        self._command_handlers[command.name] = handler

    # =========================================================================
    # Key Handling
    # =========================================================================

    def handle_key(self, event: KeyEvent) -> None:
        """Process one key event to completion.

        Args:
            event: The key press.
        """
        if self._terminated:
            return

        if event.key == Key.ESCAPE:
            self._handle_escape()
        elif self._mode == SessionMode.EXIT_CONFIRM:
            self._handle_exit_confirm_key(event)
        elif event.key == Key.CTRL_C:
            self._arm_exit()
        elif self._mode == SessionMode.COMMAND_PALETTE:
            self._handle_palette_key(event)
        elif self._mode == SessionMode.THEME_SELECTOR:
            self._handle_selector_key(event)
        else:
            self._handle_input_key(event)

        self._notify_change()

    def insert_text(self, text: str) -> None:
        """Append pasted text to the input buffer as typed.

        Unlike a key press, the text never triggers the empty-buffer
        shortcuts. Non-printable characters are dropped. In the command
        palette the search is re-run; the theme selector ignores it, and a
        pending exit confirmation is dismissed with the text consumed.

        Args:
            text: Text to insert.
        """
        text = "".join(char for char in text if char.isprintable())
        if self._terminated or not text:
            return

        if self._mode == SessionMode.EXIT_CONFIRM:
            self._set_mode(SessionMode.NORMAL)
        elif self._mode == SessionMode.COMMAND_PALETTE:
            self._buffer += text
            self._palette.set_query(self._buffer[1:])
        elif self._mode != SessionMode.THEME_SELECTOR:
            self._buffer += text
        else:
            return

        self._notify_change()

    def _handle_escape(self) -> None:
        """Close the innermost overlay, else cancel a response, else clear input."""
        match self._mode:
            case SessionMode.EXIT_CONFIRM | SessionMode.HELP:
                self._set_mode(SessionMode.NORMAL)
            case SessionMode.COMMAND_PALETTE:
                self._palette.close()
                self._set_mode(SessionMode.NORMAL)
            case SessionMode.THEME_SELECTOR:
                self._selector.cancel(self._registry)
                self._set_mode(SessionMode.NORMAL)
            case _:
                if self.is_pending:
                    self.cancel_response()
                elif self._buffer:
                    self._buffer = ""

    def _handle_exit_confirm_key(self, event: KeyEvent) -> None:
        """Exit on q or Ctrl+C; any other key dismisses the confirmation."""
        if event.key == Key.CTRL_C or (event.key == Key.CHAR and event.char == "q"):
            self._terminate()
            return
        self._set_mode(SessionMode.NORMAL)

    def _arm_exit(self) -> None:
        """Enter exit confirmation, closing whatever overlay is open."""
        if self._mode == SessionMode.THEME_SELECTOR:
            self._selector.cancel(self._registry)
            self._set_mode(SessionMode.NORMAL)
        elif self._mode == SessionMode.COMMAND_PALETTE:
            self._palette.close()
        self._set_mode(SessionMode.EXIT_CONFIRM)

    def _handle_input_key(self, event: KeyEvent) -> None:
        """Keys in NORMAL and HELP: buffer editing, submission and shortcuts."""
        if event.key == Key.ENTER:
            self._submit()
        elif event.key == Key.BACKSPACE:
            self._buffer = self._buffer[:-1]
        elif event.is_printable:
            char = event.char
            if not self._buffer:
                if char == "?":
                    self._toggle_help()
                    return
                if char == "/":
                    self._open_palette()
                    return
                if char == "q":
                    self._arm_exit()
                    return
            self._buffer += char

    def _toggle_help(self) -> None:
        if self._mode == SessionMode.HELP:
            self._set_mode(SessionMode.NORMAL)
        else:
            self._set_mode(SessionMode.HELP)

    def _open_palette(self) -> None:
        if self._mode == SessionMode.HELP:
            self._set_mode(SessionMode.NORMAL)
        self._palette.open()
        self._buffer = "/"
        self._set_mode(SessionMode.COMMAND_PALETTE)

    def _handle_palette_key(self, event: KeyEvent) -> None:
        """Keys while the command palette is open."""
        direction = event.direction
        if direction is not None:
            self._palette.move_selection(direction)
        elif event.key == Key.ENTER:
            self._confirm_palette()
        elif event.key == Key.BACKSPACE:
            self._buffer = self._buffer[:-1]
            if not self._buffer.startswith("/"):
                self._palette.close()
                self._set_mode(SessionMode.NORMAL)
            else:
                self._palette.set_query(self._buffer[1:])
        elif event.is_printable:
            self._buffer += event.char
            self._palette.set_query(self._buffer[1:])

    def _confirm_palette(self) -> None:
        """Run the selected command. The palette closes and the buffer clears."""
        command = self._palette.confirm()
        typed = self._buffer
        self._palette.close()
        self._buffer = ""
        self._set_mode(SessionMode.NORMAL)

        if command is None:
            self.append_status(f"Command not found: {typed}")
            return
        self.run_command(command)

    def _handle_selector_key(self, event: KeyEvent) -> None:
        """Keys while the theme selector is open; everything else is ignored."""
        direction = event.direction
        if direction is not None:
            self._selector.move_selection(direction)
        elif event.key == Key.ENTER:
            old_theme = self._selector.previous_active_name or ""
            theme = self._selector.commit(self._registry)
            self._set_mode(SessionMode.NORMAL)
            if theme is not None:
                self._emit(ThemeChangedEvent(event_id=_event_id("theme"), old_theme=old_theme, new_theme=theme.name))
                self.append_status(f"Theme changed to: {theme.name}")

    # =========================================================================
    # Commands
    # =========================================================================

    def run_command(self, command: Command) -> None:
        """Execute a catalog command.

        /help, /select-theme, /exit and /clear are handled here; other
        commands run their registered handler and are inert without one.

        Args:
            command: Command to run.
        """
        name = command.name
        if name == HELP:
            self.append_status(self._help_text())
        elif name == SELECT_THEME:
            self.open_theme_selector()
        elif name == EXIT:
            self._terminate()
        elif name == CLEAR:
            self._log.clear()
        else:
            handler = self._command_handlers.get(name)
            if handler is None:
                logger.debug("No handler for command %s", name)
                return
            try:
                text = handler()
            except Exception as e:
                logger.exception("Command %s failed", name)
                self.append_status(f"Error: {name}: {e}")
                return
            if text:
                self.append_status(text)

    def open_theme_selector(self) -> None:
        """Open the theme selector from NORMAL, capturing the active theme."""
        if self._mode != SessionMode.NORMAL:
            logger.debug("Theme selector requested from %s, ignoring", self._mode.value)
            return
        self._selector.open(self._registry)
        self._set_mode(SessionMode.THEME_SELECTOR)

    def _help_text(self) -> str:
        lines = ["Available commands:"]
        width = max((len(c.name) for c in self._catalog), default=0)
        for command in self._catalog:
            lines.append(f"  {command.name.ljust(width)}  {command.description}")
        return "\n".join(lines)

    # =========================================================================
    # Messages & Responses
    # =========================================================================

    def append_status(self, text: str) -> None:
        """Append a status message to the log."""
        self._append(MessageRole.STATUS, text)

    def _append(self, role: MessageRole, content: str) -> None:
        message = Message(role=role, content=content, timestamp=self._clock().strftime(self._timestamp_format))
        self._log.append(message)
        self._emit(MessageAppendedEvent(event_id=_event_id("msg"), role=role.value, content=content))

    def _submit(self) -> None:
        """Send the buffer as a user message and start the response."""
        text = self._buffer
        if not text.strip():
            return
        if self.is_pending:
            self.append_status(PENDING_REJECTED_TEXT)
            return

        self._append(MessageRole.USER, text)
        self._buffer = ""
        self._response_task = asyncio.create_task(self._respond(text))

    async def _respond(self, text: str) -> None:
        """Await the generator and append its reply unless superseded."""
        task = asyncio.current_task()
        try:
            reply = await self._response_generator(text)
        except asyncio.CancelledError:
            logger.debug("Response task cancelled")
            raise
        except Exception as e:
            logger.exception("Response generator failed")
            if self._response_task is task:
                self.append_status(f"Response failed: {e}")
        else:
            if self._response_task is task:
                self._append(MessageRole.ASSISTANT, reply)
        finally:
            if self._response_task is task:
                self._response_task = None
                self._notify_change()

    def cancel_response(self) -> bool:
        """Abort the in-flight response and drop its eventual result.

        Returns:
            True if a response was pending.
        """
        task = self._response_task
        if task is None:
            return False
        self._response_task = None
        task.cancel()
        self.append_status(RESPONSE_CANCELLED_TEXT)
        return True

    async def wait_for_response(self) -> None:
        """Wait until the pending response (if any) finishes."""
        task = self._response_task
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def aclose(self) -> None:
        """Cancel and await any in-flight response without logging a message."""
        task = self._response_task
        self._response_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # =========================================================================
    # State
    # =========================================================================

    def snapshot(self) -> SessionSnapshot:
        """Capture the current state for rendering."""
        palette_open = self._mode == SessionMode.COMMAND_PALETTE
        selector_open = self._mode == SessionMode.THEME_SELECTOR
        active = self._registry.get_active()
        return SessionSnapshot(
            mode=self._mode,
            buffer=self._buffer,
            is_pending=self.is_pending,
            terminated=self._terminated,
            messages=self._log.messages,
            theme=self.display_theme,
            palette_rows=tuple(self._palette.visible_rows()) if palette_open else (),
            palette_selected_index=self._palette.selected_index if palette_open else -1,
            palette_scroll_offset=self._palette.scroll_offset if palette_open else 0,
            selector_themes=tuple(self._selector.themes) if selector_open else (),
            selector_index=self._selector.selected_index if selector_open else 0,
            active_theme_name=active.name if active is not None else None,
        )

    def get_status_text(self) -> str:
        """Get the key hint for the current mode."""
        status_map = {
            SessionMode.NORMAL: "? for shortcuts",
            SessionMode.HELP: "? to close help",
            SessionMode.COMMAND_PALETTE: "Up/Down to navigate, Enter to run, Esc to close",
            SessionMode.THEME_SELECTOR: "Up/Down to navigate, Enter to select, Esc to cancel",
            SessionMode.EXIT_CONFIRM: "Press Ctrl+C again to exit or ESC to cancel",
        }
        return status_map.get(self._mode, "")

    def _set_mode(self, new_mode: SessionMode) -> None:
        """Transition to a new mode and notify observers."""
        if self._mode == new_mode:
            return
        old_mode = self._mode
        if new_mode not in VALID_TRANSITIONS.get(old_mode, set()):
            logger.warning("Unexpected mode transition %s -> %s", old_mode.value, new_mode.value)
        self._mode = new_mode

        for observer in self._observers:
            observer(old_mode, new_mode)
        self._emit(ModeChangedEvent(event_id=_event_id("mode"), old_mode=old_mode.value, new_mode=new_mode.value))

    def _terminate(self) -> None:
        if self._terminated:
            return
        logger.info("Session terminated")
        self._terminated = True

    def _emit(self, event: SessionEvent) -> None:
        if self._event_sink is not None:
            self._event_sink(event)

    def _notify_change(self) -> None:
        for listener in self._change_listeners:
            listener()


def _event_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"
