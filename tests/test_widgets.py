"""Tests for slurmtop.widgets module."""

import asyncio

from rich.text import Text
from textual.app import App, ComposeResult

from slurmtop.widgets import JobBoard, StatusBar


class _WidgetApp(App):
    def compose(self) -> ComposeResult:
        yield JobBoard(id="board")
        yield StatusBar(id="status")


class TestWidgets:
    """Tests for the board and status bar widgets."""

    def test_status_bar_message_updates(self) -> None:
        app = _WidgetApp()

        async def interact() -> None:
            async with app.run_test() as pilot:
                status = app.query_one("#status", StatusBar)
                status.message = "Updated @ 12:00:00"
                await pilot.pause()
                assert status.message == "Updated @ 12:00:00"

        asyncio.run(interact())

    def test_boards_keep_separate_lines(self) -> None:
        first, second = JobBoard(), JobBoard()
        assert first.lines == []
        assert first.lines is not second.lines

    def test_board_shows_lines(self) -> None:
        """Test that the board renders every line it is given."""
        app = _WidgetApp()

        async def interact() -> None:
            async with app.run_test() as pilot:
                board = app.query_one("#board", JobBoard)
                board.show_lines([Text("first"), Text("second", style="green")])
                await pilot.pause()
                assert [line.plain for line in board.lines] == ["first", "second"]

        asyncio.run(interact())
