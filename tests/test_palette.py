"""Tests for zeroide_cli.app.palette module."""

from __future__ import annotations

import pytest

from zeroide_cli.app import CommandCatalog, CommandPalette, Direction, create_default_catalog


@pytest.fixture
def palette() -> CommandPalette:
    palette = CommandPalette(create_default_catalog())
    palette.open()
    return palette


def _assert_invariants(palette: CommandPalette) -> None:
    assert -1 <= palette.selected_index <= palette.count - 1
    assert 0 <= palette.scroll_offset <= max(0, palette.count - palette.visible_window_size)
    if palette.selected_index >= 0:
        assert palette.scroll_offset <= palette.selected_index < palette.scroll_offset + palette.visible_window_size


# =============================================================================
# Open / Close Tests
# =============================================================================


def test_open_state(palette: CommandPalette) -> None:
    """Test open resets query, selection and offset."""
    assert palette.query == ""
    assert palette.selected_index == 0
    assert palette.scroll_offset == 0
    assert [c.name for c in palette.visible_rows()] == ["/help", "/select-theme", "/exit", "/clear", "/status"]


def test_close_discards_state(palette: CommandPalette) -> None:
    """Test close resets sub-state."""
    palette.set_query("about")
    palette.close()
    assert palette.query == ""
    assert palette.selected_index == 0
    assert palette.scroll_offset == 0


def test_window_size_must_be_positive() -> None:
    """Test a zero window is rejected."""
    with pytest.raises(ValueError):
        CommandPalette(create_default_catalog(), visible_window_size=0)


def test_empty_catalog() -> None:
    """Test an empty catalog has no selection."""
    palette = CommandPalette(CommandCatalog())
    palette.open()
    assert palette.selected_index == -1
    palette.move_selection(Direction.DOWN)
    assert palette.selected_index == -1
    assert palette.confirm() is None


# =============================================================================
# Query Tests
# =============================================================================


def test_query_selects_first_match(palette: CommandPalette) -> None:
    """Test the first name match is selected."""
    palette.set_query("ex")
    assert palette.confirm().name == "/exit"  # type: ignore[union-attr]


def test_query_matches_description_case_insensitive(palette: CommandPalette) -> None:
    """Test descriptions match case-insensitively."""
    palette.set_query("ZEROIDE")
    assert palette.confirm().name == "/about"  # type: ignore[union-attr]


def test_query_empty_selects_first(palette: CommandPalette) -> None:
    """Test an empty query matches the first command."""
    palette.set_query("")
    assert palette.selected_index == 0


def test_query_no_match(palette: CommandPalette) -> None:
    """Test no match means no selection and confirm returns None."""
    palette.set_query("zzz")
    assert palette.selected_index == -1
    assert palette.confirm() is None
    _assert_invariants(palette)


def test_query_never_filters(palette: CommandPalette) -> None:
    """Test the visible list is never filtered."""
    palette.set_query("exit")
    assert len(palette.commands) == 8


def test_query_scrolls_selection_into_view(palette: CommandPalette) -> None:
    """Test a match below the window scrolls it into view."""
    palette.set_query("about")
    assert palette.selected_index == 7
    assert palette.scroll_offset == 3
    _assert_invariants(palette)


# =============================================================================
# Navigation Tests
# =============================================================================


def test_move_down_scrolls(palette: CommandPalette) -> None:
    """Test moving past the window scrolls one row."""
    for _ in range(5):
        palette.move_selection(Direction.DOWN)
    assert palette.selected_index == 5
    assert palette.scroll_offset == 1


def test_move_up_wraps_to_last(palette: CommandPalette) -> None:
    """Test moving up from the top wraps to the last command."""
    palette.move_selection(Direction.UP)
    assert palette.selected_index == 7
    assert palette.scroll_offset == 3
    assert palette.visible_rows()[-1].name == "/about"


def test_move_down_wraps_to_first(palette: CommandPalette) -> None:
    """Test moving down from the last command wraps to the top."""
    palette.move_selection(Direction.UP)
    palette.move_selection(Direction.DOWN)
    assert palette.selected_index == 0
    assert palette.scroll_offset == 0


def test_move_from_no_selection(palette: CommandPalette) -> None:
    """Test moving from no selection enters the list at either end."""
    palette.set_query("zzz")
    palette.move_selection(Direction.DOWN)
    assert palette.selected_index == 0

    palette.set_query("zzz")
    palette.move_selection(Direction.UP)
    assert palette.selected_index == 7


def test_invariants_hold_through_navigation(palette: CommandPalette) -> None:
    """Test invariants hold for a long sequence of moves."""
    for step in range(40):
        palette.move_selection(Direction.DOWN if step % 3 else Direction.UP)
        _assert_invariants(palette)
