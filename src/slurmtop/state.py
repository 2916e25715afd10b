"""View and input state machine."""

from enum import Enum
from typing import Callable, List, Sequence

from .layout import PENDING_COLUMNS, RUNNING_COLUMNS, Column
from .models import JobRecord, Snapshot

# title bar, controls bar, blank, view title, blank, table header, scroll line
RESERVED_ROWS = 7


class View(Enum):
    """Top-level views, selected with keys 1-4."""

    OVERVIEW = "overview"
    RUNNING = "running"
    PENDING = "pending"
    ALL = "all"

    @property
    def columns(self) -> Sequence[Column]:
        if self is View.OVERVIEW:
            return ()
        if self is View.PENDING:
            return PENDING_COLUMNS
        return RUNNING_COLUMNS


class InputEvent(Enum):
    """Discrete input events the state machine understands."""

    NONE = "none"
    QUIT = "quit"
    REFRESH = "refresh"
    VIEW_OVERVIEW = "view_overview"
    VIEW_RUNNING = "view_running"
    VIEW_PENDING = "view_pending"
    VIEW_ALL = "view_all"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    FOCUS_LEFT = "focus_left"
    FOCUS_RIGHT = "focus_right"
    RESIZE = "resize"


_VIEW_EVENTS = {
    InputEvent.VIEW_OVERVIEW: View.OVERVIEW,
    InputEvent.VIEW_RUNNING: View.RUNNING,
    InputEvent.VIEW_PENDING: View.PENDING,
    InputEvent.VIEW_ALL: View.ALL,
}


class ViewState:
    """Current view, scroll offset and focused column, plus the snapshot shown.

    The snapshot is replaced as a whole by ``REFRESH``; ``refresher`` is called
    synchronously and its result swapped in once it returns.
    """

    def __init__(
        self,
        snapshot: Snapshot,
        refresher: Callable[[], Snapshot],
        view: View = View.OVERVIEW,
        terminal_rows: int = 24,
    ) -> None:
        self.snapshot = snapshot
        self.refresher = refresher
        self.view = view
        self.scroll_offset = 0
        self.focused_column = -1
        self.terminal_rows = terminal_rows
        self.running = True

    @property
    def page_size(self) -> int:
        """Table rows that fit on screen."""
        return max(1, self.terminal_rows - RESERVED_ROWS)

    @property
    def max_column(self) -> int:
        """Highest focusable column index, -1 when the view has no table."""
        return len(self.view.columns) - 1

    def visible_jobs(self) -> List[JobRecord]:
        """All rows of the current view, before scrolling."""
        if self.view is View.RUNNING:
            return self.snapshot.running()
        if self.view is View.PENDING:
            return self.snapshot.pending()
        if self.view is View.ALL:
            return list(self.snapshot.jobs)
        return []

    def handle(self, event: InputEvent) -> bool:
        """Apply one input event. Returns True when the screen must be redrawn."""
        if not self.running or event is InputEvent.NONE:
            return False

        if event is InputEvent.QUIT:
            self.running = False
        elif event is InputEvent.REFRESH:
            self.snapshot = self.refresher()
            self.scroll_offset = 0
        elif event in _VIEW_EVENTS:
            self.select_view(_VIEW_EVENTS[event])
        elif event is InputEvent.SCROLL_UP:
            self.scroll_offset -= 1
        elif event is InputEvent.SCROLL_DOWN:
            self.scroll_offset += 1
        elif event is InputEvent.PAGE_UP:
            self.scroll_offset -= self.page_size
        elif event is InputEvent.PAGE_DOWN:
            self.scroll_offset += self.page_size
        elif event is InputEvent.FOCUS_LEFT:
            self._cycle_focus(-1)
        elif event is InputEvent.FOCUS_RIGHT:
            self._cycle_focus(1)

        self.scroll_offset = max(0, self.scroll_offset)
        return True

    def select_view(self, view: View) -> None:
        self.view = view
        self.scroll_offset = 0
        self.focused_column = -1

    def _cycle_focus(self, step: int) -> None:
        if self.view is View.OVERVIEW:
            return
        # positions run -1..max_column, so shift by one for the modulo
        positions = self.max_column + 2
        self.focused_column = (self.focused_column + 1 + step) % positions - 1
