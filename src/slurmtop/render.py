"""Render the current view into styled text lines."""

from typing import Dict, List, Optional, Sequence

from rich.text import Text

from .layout import Column, compose_row, header_cells, layout_columns, row_cells
from .models import JobRecord, JobState
from .state import View, ViewState

TITLE_STYLE = "bold black on cyan"
CONTROLS_STYLE = "black on cyan"
HEADING_STYLE = "bold cyan"
FOCUS_STYLE = "bold red"
TOTAL_STYLE = "bold red"

VIEW_SELECTOR = "[1]Overview [2]Running [3]Pending [4]All"
CONTROLS = "Controls: Up/Down:Scroll  Left/Right:Focus Column  PgUp/PgDn:Page  R:Refresh  Q:Quit"

JOB_STATE_COLORS = {
    JobState.RUNNING: "green",
    JobState.PENDING: "yellow",
}

_TABLE_TITLES = {
    View.RUNNING: "RUNNING JOBS",
    View.PENDING: "PENDING JOBS",
    View.ALL: "ALL JOBS",
}

_TABLE_STYLES: Dict[View, Optional[str]] = {
    View.RUNNING: "green",
    View.PENDING: "yellow",
    View.ALL: None,
}


def _bar(content: str, width: int, style: str) -> Text:
    return Text(content[:width].ljust(width), style=style)


def render_title_bars(state: ViewState, width: int) -> List[Text]:
    """Title bar with user and view selector, then the controls bar."""
    title = f"  SLURM Top - User: {state.snapshot.username}"
    selector_x = max(width - 60, 40)
    if selector_x > len(title):
        title = title.ljust(selector_x) + VIEW_SELECTOR
    else:
        title = f"{title}  {VIEW_SELECTOR}"
    return [_bar(title, width, TITLE_STYLE), _bar(f"  {CONTROLS}", width, CONTROLS_STYLE)]


def _gpu_section(heading: str, totals: Dict[str, int], total_label: str, style: str) -> List[Text]:
    lines = [Text(f"  {heading}", style=HEADING_STYLE), Text("")]
    for gpu_type in sorted(totals):
        lines.append(Text(f"    {gpu_type:<15}: {totals[gpu_type]} GPUs", style=style))
    lines.append(Text(""))
    lines.append(Text(f"    {total_label} {sum(totals.values())} GPUs", style=TOTAL_STYLE))
    return lines


def render_overview(state: ViewState) -> List[Text]:
    """Job counts and GPU totals per type."""
    snap = state.snapshot
    lines = [
        Text("  JOB OVERVIEW", style=HEADING_STYLE),
        Text(""),
        Text(f"    Total Jobs: {snap.total_jobs}"),
        Text(f"    Running:    {snap.running_jobs}", style="green"),
        Text(f"    Pending:    {snap.pending_jobs}", style="yellow"),
    ]
    if snap.dropped_jobs:
        lines.append(Text(f"    Vanished:   {snap.dropped_jobs}", style="dim"))
    lines.extend([Text(""), Text("")])

    if snap.gpu_type_count:
        lines.extend(_gpu_section("RUNNING - GPU ALLOCATIONS", snap.gpu_type_count, "Total Running: ", "green"))
        lines.extend([Text(""), Text("")])
    if snap.gpu_type_requested:
        lines.extend(_gpu_section("PENDING - GPU REQUESTS", snap.gpu_type_requested, "Total Requested:", "yellow"))
    return lines


def scroll_indicator(offset: int, page_size: int, total: int) -> str:
    """``Showing a-b of n (Scroll: p%)`` for a table longer than one page."""
    last = min(offset + page_size, total)
    percent = offset * 100 // max(1, total - page_size)
    return f"Showing {offset + 1}-{last} of {total} (Scroll: {percent}%)"


def _row_style(view: View, job: JobRecord) -> Optional[str]:
    if view is View.ALL:
        return JOB_STATE_COLORS.get(job.kind)
    return _TABLE_STYLES[view]


def _header_line(columns: Sequence[Column], widths: Sequence[int], focused: int, width: int) -> Text:
    cells = header_cells(columns, widths, focused)
    line = Text(style="bold")
    pos = 0
    limit = max(width - 2, 0)
    for i, (cell, cell_width) in enumerate(zip(cells, widths)):
        if pos >= limit:
            break
        chunk = (cell.ljust(cell_width) + " ")[: limit - pos]
        line.append(chunk, style=FOCUS_STYLE if i == focused else None)
        pos += len(chunk)
    return line


def render_table(state: ViewState, width: int) -> List[Text]:
    """Title, header and the visible page of the current table view."""
    view = state.view
    columns = view.columns
    jobs = state.visible_jobs()
    focused = state.focused_column if 0 <= state.focused_column < len(columns) else -1
    widths = layout_columns(columns, jobs, state.snapshot, width, focused)

    lines = [
        Text(f"  {_TABLE_TITLES[view]} ({len(jobs)} jobs)", style=HEADING_STYLE),
        Text(""),
        _header_line(columns, widths, focused, width),
    ]
    page = jobs[state.scroll_offset : state.scroll_offset + state.page_size]
    for job in page:
        cells = row_cells(columns, job, state.snapshot, widths, focused)
        lines.append(Text(compose_row(cells, widths, width, focused), style=_row_style(view, job) or ""))

    if len(jobs) > state.page_size:
        lines.extend(Text("") for _ in range(state.page_size - len(page)))
        lines.append(Text(f"  {scroll_indicator(state.scroll_offset, state.page_size, len(jobs))}"))
    return lines


def render_view(state: ViewState, width: int) -> List[Text]:
    """Every line of the screen for the current state."""
    lines = render_title_bars(state, width)
    lines.append(Text(""))
    if state.view is View.OVERVIEW:
        lines.extend(render_overview(state))
    else:
        lines.extend(render_table(state, width))
    return lines
