"""Main slurmtop application."""

import logging
from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding

from .models import Snapshot
from .render import render_view
from .snapshot import JobSource, refresh
from .state import InputEvent, View, ViewState
from .styles import APP_CSS
from .widgets import JobBoard, StatusBar

logger = logging.getLogger(__name__)


class SlurmTop(App):
    """Live view of one user's Slurm jobs and where they stand in the queue."""

    CSS = APP_CSS

    BINDINGS = [
        Binding("q,Q", "input('quit')", "Quit"),
        Binding("r,R", "input('refresh')", "Refresh"),
        Binding("1", "input('view_overview')", "Overview", show=False),
        Binding("2", "input('view_running')", "Running", show=False),
        Binding("3", "input('view_pending')", "Pending", show=False),
        Binding("4", "input('view_all')", "All", show=False),
        Binding("up", "input('scroll_up')", "Up", show=False),
        Binding("down", "input('scroll_down')", "Down", show=False),
        Binding("pageup", "input('page_up')", "PgUp", show=False),
        Binding("pagedown", "input('page_down')", "PgDn", show=False),
        Binding("left", "input('focus_left')", "Focus left", show=False),
        Binding("right", "input('focus_right')", "Focus right", show=False),
    ]

    def __init__(
        self,
        *,
        username: str,
        source: JobSource,
        refresh_sec: float = 0.0,
        view: View = View.OVERVIEW,
        dark: bool = True,
    ) -> None:
        super().__init__()
        self.username = username
        self.source = source
        self.refresh_sec = refresh_sec
        self.dark_theme = dark
        self.view_state = ViewState(Snapshot(username=username), self._fetch_snapshot, view=view)
        self.status = StatusBar(classes="bar status")
        self.board = JobBoard(classes="board")

    def compose(self) -> ComposeResult:
        yield self.board
        yield self.status

    def on_mount(self) -> None:
        self.theme = "textual-dark" if self.dark_theme else "textual-light"
        self.call_after_refresh(self.handle_input, InputEvent.REFRESH)
        if self.refresh_sec > 0:
            self.set_interval(self.refresh_sec, self._scheduled_refresh)

    def on_resize(self, event: events.Resize) -> None:
        self.call_after_refresh(self.handle_input, InputEvent.RESIZE)

    def _fetch_snapshot(self) -> Snapshot:
        return refresh(self.username, self.source)

    def _scheduled_refresh(self) -> None:
        self.handle_input(InputEvent.REFRESH)

    def action_input(self, name: str) -> None:
        """Feed a named input event to the state machine."""
        self.handle_input(InputEvent(name))

    def handle_input(self, event: InputEvent) -> None:
        """Apply ``event`` and redraw if the state machine asks for it."""
        try:
            redraw = self.view_state.handle(event)
        except Exception as e:
            logger.exception("handling %s failed", event.value)
            self.status.message = f"Error: {e}"
            return

        if not self.view_state.running:
            self.exit()
            return
        if event is InputEvent.REFRESH:
            self._report_refresh()
        if redraw:
            self.redraw()

    def redraw(self) -> None:
        """Lay out and paint the current view at the board's current size."""
        width = self.board.size.width or self.size.width
        height = self.board.size.height or self.size.height
        self.view_state.terminal_rows = height
        self.board.show_lines(render_view(self.view_state, width))

    def _report_refresh(self) -> None:
        snap = self.view_state.snapshot
        refresh_time = snap.fetched_at.strftime("%H:%M:%S") if snap.fetched_at else "--:--:--"
        message = f"Updated @ {refresh_time} | Jobs: {snap.total_jobs} | Queue: {len(snap.all_pending_jobs)}"
        if snap.dropped_jobs:
            message += f" | Vanished: {snap.dropped_jobs}"
        if self.refresh_sec > 0:
            message += f" | Interval: {self.refresh_sec:.0f}s"
        self.status.message = message


def run_app(username: str, source: JobSource, refresh_sec: float = 0.0, view: Optional[View] = None,
            dark: bool = True) -> None:
    """Run the dashboard until the user quits."""
    SlurmTop(username=username, source=source, refresh_sec=refresh_sec, view=view or View.OVERVIEW, dark=dark).run()
