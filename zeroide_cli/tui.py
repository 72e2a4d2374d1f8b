"""TUI Application for zeroide-cli.

This module hosts the session state machine in a prompt_toolkit application:
- Full-screen layout repainted from SessionSnapshot via Rich
- Raw key presses translated to KeyEvents
- Handlers for the informational slash commands
- Log records routed to the status bar instead of stderr

Example:
    from zeroide_cli.tui import TUIApp

    async with TUIApp(config, config_manager) as app:
        await app.run()

"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from types import TracebackType
from typing import TYPE_CHECKING

from prompt_toolkit import Application
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style

from zeroide_cli import __version__
from zeroide_cli.app import KeyEvent, SessionStateMachine
from zeroide_cli.app import keys as session_keys
from zeroide_cli.app.commands import ABOUT, CONFIG, STATUS, VERSION
from zeroide_cli.config import AUTO_THEME, ConfigManager, ZeroideConfig
from zeroide_cli.display import RichRenderer, render_screen
from zeroide_cli.events import LogEvent, MessageAppendedEvent, ModeChangedEvent, SessionEvent, ThemeChangedEvent
from zeroide_cli.logging import configure_tui_logging, get_logger, reset_logging
from zeroide_cli.responder import EchoResponder, ResponseGenerator
from zeroide_cli.themes import ThemeRegistry, resolve_default_theme

if TYPE_CHECKING:
    from prompt_toolkit.key_binding import KeyPressEvent

logger = get_logger(__name__)

NOTICE_LEVELS = frozenset({"WARNING", "ERROR", "CRITICAL"})

ABOUT_TEXT = "ZeroIDE CLI - a keystroke-driven terminal chat console"


# =============================================================================
# Session Factory
# =============================================================================


def build_session(
    config: ZeroideConfig,
    theme_override: str | None = None,
    response_generator: ResponseGenerator | None = None,
    event_sink: Callable[[SessionEvent], None] | None = None,
) -> SessionStateMachine:
    """Build a theme registry and session from configuration.

    The initial theme is, in order: the override, the configured theme name,
    or system detection when the chosen name is "auto".

    Args:
        config: Loaded configuration.
        theme_override: Theme name from the command line.
        response_generator: Reply producer, an EchoResponder using the
            configured delay when omitted.
        event_sink: Receives session events.

    Returns:
        A new session in NORMAL mode.
    """
    requested = theme_override or config.display.theme
    default_theme: str | Callable[[], str] = requested
    if requested.lower() == AUTO_THEME:
        default_theme = resolve_default_theme

    registry = ThemeRegistry(
        default_theme=default_theme,
        custom_themes=config.get_custom_themes(),
    )
    active = registry.get_active()
    if active is not None and active.name != registry.default_name:
        logger.warning("Theme %r not found, using %r", registry.default_name, active.name)

    return SessionStateMachine(
        registry=registry,
        response_generator=response_generator or EchoResponder(delay=config.response.delay),
        timestamp_format=config.display.timestamp_format,
        event_sink=event_sink,
    )


# =============================================================================
# TUI Application
# =============================================================================


@dataclass
class TUIApp:
    """Main TUI application class.

    Manages the lifecycle of:
    - SessionStateMachine (with its ThemeRegistry)
    - Log queue consumer
    - prompt_toolkit Application

    Usage:
        async with TUIApp(config, config_manager) as app:
            await app.run()
    """

    config: ZeroideConfig
    config_manager: ConfigManager
    verbose: bool = False
    theme_override: str | None = None

    # Resources (initialized in __aenter__)
    _session: SessionStateMachine | None = field(default=None, init=False)
    _log_task: asyncio.Task[None] | None = field(default=None, init=False)
    _log_queue: asyncio.Queue[LogEvent] | None = field(default=None, init=False, repr=False)

    # UI components
    _app: Application[None] | None = field(default=None, init=False, repr=False)
    _renderer: RichRenderer = field(default_factory=RichRenderer, init=False)
    _notice: str | None = field(default=None, init=False)
    _exit_requested: bool = field(default=False, init=False)

    @property
    def session(self) -> SessionStateMachine:
        """Get the session (must be entered first)."""
        if self._session is None:
            raise RuntimeError("TUIApp not entered. Use 'async with app:' first.")
        return self._session

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def __aenter__(self) -> TUIApp:
        """Initialize resources."""
        self._session = build_session(
            self.config,
            theme_override=self.theme_override,
            event_sink=self._on_session_event,
        )
        self._session.register_command_handler(STATUS, self._status_text)
        self._session.register_command_handler(VERSION, lambda: f"zeroide v{__version__}")
        self._session.register_command_handler(CONFIG, self._config_text)
        self._session.register_command_handler(ABOUT, lambda: ABOUT_TEXT)
        self._session.add_change_listener(self._on_session_change)

        logger.info("TUIApp initialized")
        # Stop writing to stderr once the TUI owns the terminal
        self._log_queue = asyncio.Queue()
        configure_tui_logging(self._log_queue, level=logging.DEBUG if self.verbose else logging.INFO)
        self._log_task = asyncio.create_task(self._consume_logs(self._log_queue))
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Cleanup resources."""
        if self._session is not None:
            await self._session.aclose()

        if self._log_task and not self._log_task.done():
            self._log_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._log_task
        self._log_task = None

        reset_logging()

    # =========================================================================
    # Session Wiring
    # =========================================================================

    def _on_session_change(self) -> None:
        """Repaint, or exit once the session has terminated."""
        if not self._app:
            return
        if self.session.terminated:
            if self._app.is_running and not self._exit_requested:
                self._exit_requested = True
                self._app.exit()
            return
        self._app.invalidate()

    def _on_session_event(self, event: SessionEvent) -> None:
        """Log session events."""
        if isinstance(event, ThemeChangedEvent):
            logger.info("Theme changed: %s -> %s", event.old_theme, event.new_theme)
        elif isinstance(event, ModeChangedEvent):
            logger.debug("Mode changed: %s -> %s", event.old_mode, event.new_mode)
        elif isinstance(event, MessageAppendedEvent):
            logger.debug("Message appended: %s", event.role)

    async def _consume_logs(self, queue: asyncio.Queue[LogEvent]) -> None:
        """Show the latest warning-or-worse log message in the status bar."""
        while True:
            event = await queue.get()
            if event.level in NOTICE_LEVELS:
                self._notice = event.message.splitlines()[0] if event.message else None
                if self._app:
                    self._app.invalidate()

    def _status_text(self) -> str:
        session = self.session
        active = session.registry.get_active()
        sources = ", ".join(self.config_manager.loaded_sources) or "defaults"
        return (
            f"Theme: {active.name if active else '-'} | "
            f"Messages: {len(session.messages)} | "
            f"Pending: {'yes' if session.is_pending else 'no'} | "
            f"Config: {sources}"
        )

    def _config_text(self) -> str:
        lines = [
            f"Global config: {self.config_manager.get_global_config_file()}",
            f"Project config: {self.config_manager.get_project_config_file()}",
            f"Theme: {self.config.display.theme}",
            f"Timestamp format: {self.config.display.timestamp_format}",
            f"Response delay: {self.config.response.delay}s",
            f"Custom themes: {', '.join(self.config.themes) or '-'}",
        ]
        return "\n".join(lines)

    # =========================================================================
    # Rendering
    # =========================================================================

    def _get_terminal_size(self) -> tuple[int, int]:
        """Get current terminal (columns, rows) for Rich rendering."""
        if self._app and self._app.output:
            size = self._app.output.get_size()
            return size.columns, size.rows
        return 120, 40

    def _get_screen_text(self) -> ANSI:
        """Render the session and keep the bottom rows that fit on screen."""
        columns, rows = self._get_terminal_size()
        session = self.session
        renderable = render_screen(
            session.snapshot(),
            width=columns,
            hint=session.get_status_text(),
            notice=self._notice,
        )
        lines = self._renderer.render(renderable, width=columns).rstrip("\n").split("\n")
        return ANSI("\n".join(lines[-rows:]))

    # =========================================================================
    # UI Setup
    # =========================================================================

    def _setup_keybindings(self) -> KeyBindings:
        """Set up keyboard bindings that forward keys to the session."""
        kb = KeyBindings()
        session = self.session

        def _forward(key_event: KeyEvent) -> None:
            session.handle_key(key_event)

        @kb.add("c-c")
        def handle_ctrl_c(event: KeyPressEvent) -> None:
            """Arm or confirm exit."""
            _forward(session_keys.CTRL_C)

        @kb.add("escape", eager=True)
        def handle_escape(event: KeyPressEvent) -> None:
            """Close the innermost overlay, cancel a response or clear input."""
            _forward(session_keys.ESCAPE)

        @kb.add("enter")
        def handle_enter(event: KeyPressEvent) -> None:
            _forward(session_keys.ENTER)

        @kb.add("backspace")
        @kb.add("delete")
        def handle_backspace(event: KeyPressEvent) -> None:
            _forward(session_keys.BACKSPACE)

        @kb.add("up")
        def handle_up(event: KeyPressEvent) -> None:
            _forward(session_keys.UP)

        @kb.add("down")
        def handle_down(event: KeyPressEvent) -> None:
            _forward(session_keys.DOWN)

        @kb.add(Keys.BracketedPaste)
        def handle_paste(event: KeyPressEvent) -> None:
            """Insert pasted text into the buffer as one edit."""
            session.insert_text(event.data.replace("\r", "").replace("\n", " "))

        @kb.add(Keys.Any)
        def handle_char(event: KeyPressEvent) -> None:
            """Forward printable characters; other keys are ignored."""
            char = event.data
            if len(char) == 1 and char.isprintable():
                _forward(KeyEvent.char_key(char))

        return kb

    def _setup_style(self) -> Style:
        """Set up UI styles."""
        return Style.from_dict({
            "screen": "",
        })

    # =========================================================================
    # Main Run Loop
    # =========================================================================

    async def run(self) -> None:
        """Run the TUI application until the session terminates."""
        screen = Window(
            content=FormattedTextControl(self._get_screen_text, show_cursor=False),
            style="class:screen",
            wrap_lines=False,
        )
        layout = Layout(HSplit([screen]))

        self._app = Application(
            layout=layout,
            key_bindings=self._setup_keybindings(),
            style=self._setup_style(),
            full_screen=True,
        )
        # Escape is a complete key here, not the start of a sequence
        self._app.ttimeoutlen = 0.05

        try:
            await self._app.run_async()
        except Exception as e:
            # Re-raise to be caught by cli.py with proper error display
            raise RuntimeError(f"TUI crashed: {e}") from e
        finally:
            await self.session.aclose()
