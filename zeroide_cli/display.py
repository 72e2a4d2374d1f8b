"""Display components for TUI rendering.

This module turns a SessionSnapshot into Rich renderables:
- RichRenderer: Convert Rich renderables to ANSI strings
- render_screen(): Whole-screen renderable for one snapshot
- render_*(): Individual surfaces (logo, tips, messages, input box,
  help, command palette, exit confirmation, theme selector, status bar)

Every function here is a pure function of its arguments; nothing reads or
mutates session state.

Example:
    renderer = RichRenderer(width=120)
    text = renderer.render(render_screen(session.snapshot(), width=120))
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import cache
from importlib import resources
from io import StringIO
from typing import Any

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from zeroide_cli.app.commands import Command
from zeroide_cli.app.messages import Message, MessageRole
from zeroide_cli.app.state import SessionMode, SessionSnapshot
from zeroide_cli.themes import Theme, ThemeColors, fallback_themes

COMPACT_LOGO = "ZeroIDE"
INPUT_PLACEHOLDER = "Type your message..."
PENDING_TEXT = "Processing your request"

MESSAGE_PREFIXES: dict[MessageRole, tuple[str, str]] = {
    MessageRole.USER: (">", "primary"),
    MessageRole.ASSISTANT: ("◆", "success"),
    MessageRole.TOOL: ("←", "accent"),
    MessageRole.STATUS: (":", "warning"),
}
"""Prefix glyph and color role per message role."""


# =============================================================================
# Rich Renderer
# =============================================================================


class RichRenderer:
    """Convert Rich renderables to ANSI strings for the TUI.

    A new Console is created per render call to ensure clean output.
    """

    def __init__(self, width: int | None = None) -> None:
        self._width = width or 120

    def render(self, renderable: Any, width: int | None = None) -> str:
        """Render Rich object to ANSI string.

        Args:
            renderable: Rich renderable object
            width: Optional width override.
        """
        render_width = width or self._width
        string_io = StringIO()
        console = Console(
            file=string_io,
            force_terminal=True,
            width=render_width,
            no_color=False,
        )
        console.print(renderable)
        return string_io.getvalue()

    def render_plain(self, renderable: Any, width: int | None = None) -> str:
        """Render Rich object to plain text without styling."""
        render_width = width or self._width
        string_io = StringIO()
        console = Console(file=string_io, width=render_width, color_system=None)
        console.print(renderable)
        return string_io.getvalue()


# =============================================================================
# Helpers
# =============================================================================


@cache
def load_logo() -> tuple[str, ...]:
    """Load the packaged ASCII logo lines."""
    text = resources.files("zeroide_cli").joinpath("templates", "logo.txt").read_text(encoding="utf-8")
    return tuple(line for line in text.splitlines() if line.strip())


def _colors(theme: Theme | None) -> ThemeColors:
    if theme is not None:
        return theme.colors
    return fallback_themes()[-1].colors


def _role_color(colors: ThemeColors, role: str) -> str:
    return getattr(colors, role)


# =============================================================================
# Surfaces
# =============================================================================


def render_logo(theme: Theme | None, width: int, logo_lines: Sequence[str] | None = None) -> RenderableType:
    """Render the centered logo, or a compact wordmark if it does not fit.

    Logo lines cycle through the theme's gradient colors when it has any.
    """
    colors = _colors(theme)
    lines = load_logo() if logo_lines is None else tuple(logo_lines)
    if not lines or max(len(line) for line in lines) > width:
        return Text(COMPACT_LOGO, style=f"bold {colors.primary}", justify="center")

    gradients = theme.gradients if theme is not None and theme.gradients else (colors.primary,)
    text = Text(justify="center")
    for index, line in enumerate(lines):
        if index:
            text.append("\n")
        text.append(line, style=gradients[index % len(gradients)])
    return text


def render_tips(theme: Theme | None) -> RenderableType:
    """Render the getting-started tips box."""
    colors = _colors(theme)
    text = Text(style=colors.text)
    text.append("Tips for getting started:\n", style="bold")
    text.append("1. Ask questions, edit files, or run commands.\n")
    text.append("2. Be specific for the best results.\n")
    text.append("3. ")
    text.append("/help", style="bold")
    text.append(" for more information.")
    return Panel(text, border_style=colors.border, expand=True)


def render_message(message: Message, theme: Theme | None) -> RenderableType:
    """Render one chat message with its role glyph and timestamp."""
    colors = _colors(theme)
    glyph, role = MESSAGE_PREFIXES.get(message.role, (":", "text"))

    grid = Table.grid(padding=(0, 1))
    grid.add_column(no_wrap=True)
    grid.add_column(ratio=1)
    body = Text(message.content, style=colors.text)
    if message.timestamp:
        body.append("\n")
        body.append(message.timestamp, style=f"italic {colors.secondary}")
    grid.add_row(Text(glyph, style=_role_color(colors, role)), body)
    return grid


def render_pending(theme: Theme | None) -> RenderableType:
    """Render the in-flight response indicator."""
    colors = _colors(theme)
    text = Text()
    text.append(":", style=colors.warning)
    text.append(f" {PENDING_TEXT}", style=colors.text)
    text.append(" (esc to cancel)", style=colors.secondary)
    return text


def render_input_box(buffer: str, theme: Theme | None) -> RenderableType:
    """Render the rounded input box with cursor and placeholder."""
    colors = _colors(theme)
    text = Text()
    text.append(">", style=colors.primary)
    text.append(f" {buffer}", style=colors.input)
    text.append(" ", style=f"reverse {colors.input}")
    if not buffer:
        text.append(f" {INPUT_PLACEHOLDER}", style=f"italic {colors.secondary}")
    return Panel(text, border_style=colors.border, padding=(0, 1))


def render_help(theme: Theme | None) -> RenderableType:
    """Render the shortcut help shown below the input box."""
    colors = _colors(theme)
    table = Table(show_header=True, box=None, padding=(0, 2), expand=True, header_style=f"bold {colors.secondary}")
    table.add_column("Commands/Modes:", style=colors.secondary, ratio=1)
    table.add_column("Shortcuts (? for this help):", style=colors.secondary, ratio=1)
    table.add_row("/ for commands", "esc to clear input")
    table.add_row("? to toggle this help", "esc to cancel a response")
    table.add_row("q to quit (empty input)", "ctrl + c to exit")
    return table


def render_palette(
    rows: Sequence[Command],
    selected_index: int,
    scroll_offset: int,
    theme: Theme | None,
) -> RenderableType:
    """Render the visible command palette rows.

    Args:
        rows: Commands inside the visible window.
        selected_index: Absolute index of the highlighted command (-1 for none).
        scroll_offset: Absolute index of the first visible row.
        theme: Theme to paint with.
    """
    colors = _colors(theme)
    text = Text()
    for index, command in enumerate(rows):
        if index:
            text.append("\n")
        if scroll_offset + index == selected_index:
            style = f"bold {colors.selection}"
        else:
            style = colors.secondary
        text.append(f"{command.name} {command.description}", style=style)
    return text


def render_exit_confirm(theme: Theme | None) -> RenderableType:
    """Render the exit confirmation prompt."""
    return Text("Press Ctrl+C again to exit or ESC to cancel", style=_colors(theme).secondary)


def render_status_bar(theme: Theme | None, hint: str, notice: str | None = None) -> RenderableType:
    """Render the bottom status line.

    Args:
        theme: Theme to paint with; its name is shown on the right.
        hint: Key hint for the current mode.
        notice: Optional log notice shown after the hint.
    """
    colors = _colors(theme)
    grid = Table.grid(expand=True)
    grid.add_column(ratio=1)
    grid.add_column(justify="right", no_wrap=True)
    left = Text(hint, style=colors.text)
    if notice:
        left.append(f"  {notice}", style=colors.warning)
    right = Text()
    right.append(theme.name if theme is not None else "", style=colors.secondary)
    right.append(" | ", style=colors.text)
    right.append("zeroide", style=colors.primary)
    grid.add_row(left, right)
    return grid


def render_theme_preview(theme: Theme | None) -> RenderableType:
    """Render a miniature chat screen painted with the previewed theme."""
    colors = _colors(theme)
    tips = Text(style=colors.text)
    tips.append("Tips:\n", style="bold")
    tips.append("Type ? for help")

    user = Text()
    user.append(">", style=colors.primary)
    user.append(" User message", style=colors.text)
    reply = Text()
    reply.append("◆", style=colors.success)
    reply.append(" AI response", style=colors.text)
    prompt = Text()
    prompt.append(">", style=colors.primary)
    prompt.append(" Type here...", style=colors.input)

    body = Group(
        Text(COMPACT_LOGO, style=colors.primary, justify="center"),
        Panel(tips, border_style=colors.border),
        user,
        reply,
        Panel(prompt, border_style=colors.border),
    )
    style = f"on {colors.background}" if colors.background else ""
    return Panel(body, border_style=colors.border, style=style)


def render_theme_selector(
    themes: Sequence[Theme],
    selected_index: int,
    active_name: str | None,
) -> RenderableType:
    """Render the theme list beside a live preview of the highlighted theme.

    Args:
        themes: Themes captured when the selector opened.
        selected_index: Index of the highlighted theme.
        active_name: Theme currently committed in the registry.
    """
    listing = Text()
    listing.append("> Select Theme\n\n", style="bold white")
    for index, theme in enumerate(themes):
        color = "green" if theme.name == active_name else "white"
        style = f"bold {color}" if index == selected_index else color
        marker = "❯ " if index == selected_index else "  "
        listing.append(f"{marker}{theme.name}\n", style=style)
        if theme.preview:
            listing.append(f"    {theme.preview}\n", style="italic bright_black")
    listing.append("\n(Use Up/Down to navigate, Enter to select)\n", style="italic bright_black")
    listing.append("Esc to cancel", style="bright_black")

    preview_theme = themes[selected_index] if 0 <= selected_index < len(themes) else None
    preview = Group(Text("Live Preview", style="bold white"), render_theme_preview(preview_theme))

    grid = Table.grid(expand=True, padding=(0, 2))
    grid.add_column(ratio=1)
    grid.add_column(ratio=1)
    grid.add_row(listing, preview)
    return Panel(grid, border_style="bright_black", padding=(1, 2))


# =============================================================================
# Screen
# =============================================================================


def render_screen(
    snapshot: SessionSnapshot,
    width: int,
    hint: str = "",
    notice: str | None = None,
    logo_lines: Sequence[str] | None = None,
) -> RenderableType:
    """Compose the full screen for one snapshot.

    Args:
        snapshot: Session state to paint.
        width: Terminal width in columns.
        hint: Key hint for the status bar.
        notice: Optional log notice for the status bar.
        logo_lines: Logo override, the packaged logo when omitted.

    Returns:
        A renderable for the whole screen.
    """
    theme = snapshot.theme
    if snapshot.mode == SessionMode.THEME_SELECTOR:
        return render_theme_selector(snapshot.selector_themes, snapshot.selector_index, snapshot.active_theme_name)

    parts: list[RenderableType] = [
        render_logo(theme, width, logo_lines),
        Text(""),
        render_tips(theme),
        Text(""),
    ]
    for message in snapshot.messages:
        parts.append(render_message(message, theme))
        parts.append(Text(""))
    if snapshot.is_pending:
        parts.append(render_pending(theme))
        parts.append(Text(""))

    parts.append(render_input_box(snapshot.buffer, theme))

    if snapshot.mode == SessionMode.HELP:
        parts.append(render_help(theme))
    elif snapshot.mode == SessionMode.COMMAND_PALETTE:
        parts.append(
            render_palette(
                snapshot.palette_rows,
                snapshot.palette_selected_index,
                snapshot.palette_scroll_offset,
                theme,
            )
        )
    elif snapshot.mode == SessionMode.EXIT_CONFIRM:
        parts.append(render_exit_confirm(theme))

    parts.append(render_status_bar(theme, hint, notice))
    return Group(*parts)
