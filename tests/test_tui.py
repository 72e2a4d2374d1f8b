"""Tests for zeroide_cli.tui module."""

from __future__ import annotations

import logging

import pytest

from zeroide_cli.app import KeyEvent, MessageRole
from zeroide_cli.app import keys
from zeroide_cli.config import ConfigManager, DisplayConfig, ResponseConfig, ZeroideConfig
from zeroide_cli.display import RichRenderer, render_screen
from zeroide_cli.events import SessionEvent, ThemeChangedEvent
from zeroide_cli.responder import EchoResponder
from zeroide_cli.tui import TUIApp, build_session

# =============================================================================
# build_session Tests
# =============================================================================


def test_build_session_named_theme() -> None:
    """Test a configured theme name is activated."""
    session = build_session(ZeroideConfig(display=DisplayConfig(theme="Dracula")))
    assert session.registry.get_active().name == "Dracula"  # type: ignore[union-attr]


def test_build_session_override_wins() -> None:
    """Test the command-line theme beats the configured one."""
    session = build_session(ZeroideConfig(display=DisplayConfig(theme="Dracula")), theme_override="GitHub Light")
    assert session.registry.get_active().name == "GitHub Light"  # type: ignore[union-attr]


def test_build_session_unknown_theme_falls_back() -> None:
    """Test an unknown theme falls back to Default Dark."""
    session = build_session(ZeroideConfig(display=DisplayConfig(theme="Nope")))
    assert session.registry.get_active().name == "Default Dark"  # type: ignore[union-attr]


def test_build_session_auto_theme(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test auto picks a built-in default theme."""
    monkeypatch.setattr("zeroide_cli.tui.resolve_default_theme", lambda: "Default Light")
    session = build_session(ZeroideConfig())
    assert session.registry.get_active().name == "Default Light"  # type: ignore[union-attr]


def test_build_session_registers_custom_themes() -> None:
    """Test valid custom themes from config are registered."""
    colors = {
        "primary": "blue",
        "accent": "magenta",
        "error": "red",
        "warning": "yellow",
        "success": "green",
        "text": "white",
        "secondary": "bright_black",
        "border": "bright_black",
        "input": "white",
        "selection": "cyan",
    }
    config = ZeroideConfig(display=DisplayConfig(theme="Ocean"), themes={"Ocean": {"colors": colors}})
    session = build_session(config)
    assert session.registry.names()[-1] == "Ocean"
    assert session.registry.get_active().name == "Ocean"  # type: ignore[union-attr]


def test_build_session_auto_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test --theme auto runs detection like the config setting does."""
    monkeypatch.setattr("zeroide_cli.tui.resolve_default_theme", lambda: "Default Light")
    session = build_session(ZeroideConfig(display=DisplayConfig(theme="Dracula")), theme_override="AUTO")
    assert session.registry.get_active().name == "Default Light"  # type: ignore[union-attr]


def test_build_session_skips_unpaintable_custom_theme() -> None:
    """Test a custom theme with colors rich cannot paint never reaches the screen."""
    colors = {
        "primary": "blue",
        "accent": "magenta",
        "error": "red",
        "warning": "yellow",
        "success": "green",
        "text": "white",
        "secondary": "gray",
        "border": "gray",
        "input": "white",
        "selection": "cyan",
    }
    config = ZeroideConfig(display=DisplayConfig(theme="Mine"), themes={"Mine": {"colors": colors}})
    session = build_session(config)

    assert "Mine" not in session.registry
    assert session.registry.get_active().name == "Default Dark"  # type: ignore[union-attr]
    output = RichRenderer().render_plain(render_screen(session.snapshot(), width=100), width=100)
    assert "Default Dark | zeroide" in output


def test_build_session_forwards_events() -> None:
    """Test the event sink reaches the session."""
    events: list[SessionEvent] = []
    session = build_session(ZeroideConfig(display=DisplayConfig(theme="Dracula")), event_sink=events.append)
    session.open_theme_selector()
    session.handle_key(keys.DOWN)
    session.handle_key(keys.ENTER)

    theme_events = [e for e in events if isinstance(e, ThemeChangedEvent)]
    assert [(e.old_theme, e.new_theme) for e in theme_events] == [("Dracula", "GitHub Dark")]


@pytest.mark.asyncio
async def test_build_session_uses_configured_delay() -> None:
    """Test the echo responder uses the configured delay."""
    session = build_session(ZeroideConfig(display=DisplayConfig(theme="Dracula"), response=ResponseConfig(delay=0)))
    for char in "ping":
        session.handle_key(KeyEvent.char_key(char))
    session.handle_key(keys.ENTER)
    await session.wait_for_response()

    assert session.messages.last.content == (  # type: ignore[union-attr]
        'I understand you\'re asking about "ping". Let me help you with that.'
    )


@pytest.mark.asyncio
async def test_echo_responder() -> None:
    """Test the echo reply text."""
    reply = await EchoResponder(delay=0)("hi")
    assert reply == 'I understand you\'re asking about "hi". Let me help you with that.'


# =============================================================================
# TUIApp Tests
# =============================================================================


@pytest.mark.asyncio
async def test_tui_app_registers_command_handlers(config_manager: ConfigManager, clean_env: None) -> None:
    """Test the TUI wires the informational commands."""
    config = ZeroideConfig(display=DisplayConfig(theme="Dracula"))
    async with TUIApp(config=config, config_manager=config_manager) as app:
        session = app.session
        for query in ("version", "about", "status", "config"):
            for char in "/" + query:
                session.handle_key(KeyEvent.char_key(char))
            session.handle_key(keys.ENTER)

        texts = [m.content for m in session.messages.by_role(MessageRole.STATUS)]

    assert texts[0].startswith("zeroide v")
    assert texts[1].startswith("ZeroIDE CLI")
    assert texts[2].startswith("Theme: Dracula")
    assert "Response delay: 2.0s" in texts[3]


def test_tui_app_session_requires_enter(config_manager: ConfigManager) -> None:
    """Test the session is unavailable before entering the context."""
    app = TUIApp(config=ZeroideConfig(), config_manager=config_manager)
    with pytest.raises(RuntimeError):
        _ = app.session


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.mark.asyncio
async def test_tui_app_logs_theme_changes(config_manager: ConfigManager, clean_env: None) -> None:
    """Test theme changes made in the session are logged by the TUI."""
    handler = _ListHandler()
    tui_logger = logging.getLogger("zeroide_cli.tui")
    tui_logger.addHandler(handler)
    try:
        config = ZeroideConfig(display=DisplayConfig(theme="Dracula"))
        async with TUIApp(config=config, config_manager=config_manager) as app:
            app.session.open_theme_selector()
            app.session.handle_key(keys.DOWN)
            app.session.handle_key(keys.ENTER)
    finally:
        tui_logger.removeHandler(handler)

    assert "Theme changed: Dracula -> GitHub Dark" in handler.messages
