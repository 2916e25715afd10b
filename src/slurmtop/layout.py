"""Column descriptors and the adaptive column-width layout engine."""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .models import NO_GPU_TYPE, JobRecord, Snapshot

MAX_COLUMN_WIDTH = 50
DEFAULT_MIN_WIDTH = 8
SHORT_MIN_WIDTH = 5
MAX_GROWTH_PER_COLUMN = 20
FOCUS_DECORATION = 2  # the [ ] around a focused header
ELLIPSIS = "..."

CellFn = Callable[[JobRecord, Snapshot], str]


@dataclass(frozen=True)
class Column:
    """One table column.

    Attributes:
        header: Header label
        value: Cell text for a job, given the snapshot it belongs to
        min_width: Floor applied when the table has to shrink
        ellipsis: Whether a cut-off cell ends in "..."
    """

    header: str
    value: CellFn
    min_width: int = DEFAULT_MIN_WIDTH
    ellipsis: bool = False


def _gpu_type_cell(job: JobRecord, _snap: Snapshot) -> str:
    return job.gpu_type if job.gpu_count > 0 else NO_GPU_TYPE


JOB_ID = Column("JobID", lambda j, s: j.job_id)
JOB_NAME = Column("JobName", lambda j, s: j.job_name, ellipsis=True)
ACCOUNT = Column("Account", lambda j, s: j.account, ellipsis=True)
TIME_LIMIT = Column("TimeLimit", lambda j, s: j.time_limit, min_width=SHORT_MIN_WIDTH)
GPUS = Column("GPUs", lambda j, s: str(j.gpu_count), min_width=SHORT_MIN_WIDTH)
GPU_TYPE = Column("GPU Type", _gpu_type_cell, ellipsis=True)

RUNNING_COLUMNS: List[Column] = [
    JOB_ID,
    JOB_NAME,
    ACCOUNT,
    Column("Runtime", lambda j, s: j.runtime),
    TIME_LIMIT,
    GPUS,
    GPU_TYPE,
    Column("Status", lambda j, s: j.state),
]

PENDING_COLUMNS: List[Column] = [
    JOB_ID,
    JOB_NAME,
    ACCOUNT,
    Column("Reason", lambda j, s: j.reason, ellipsis=True),
    TIME_LIMIT,
    GPUS,
    GPU_TYPE,
    Column("Priority", lambda j, s: str(j.priority)),
    Column("Higher", lambda j, s: str(s.higher_priority_count(j))),
]


def required_width(column: Column, jobs: Sequence[JobRecord], snapshot: Snapshot) -> int:
    """Width the column needs: longest of header and cells, plus one, capped."""
    longest = len(column.header)
    for job in jobs:
        longest = max(longest, len(column.value(job, snapshot)))
    return min(longest + 1, MAX_COLUMN_WIDTH)


def compute_widths(
    terminal_width: int,
    required: Sequence[int],
    focused: int = -1,
    floors: Optional[Sequence[int]] = None,
) -> List[int]:
    """Assign a width to every column under the terminal width budget.

    The budget is the terminal width minus one separator per gap and a
    two-cell margin. With a focused column, that column takes what it needs
    (plus room for its brackets) and the others share the rest, never growing
    past their own requirement until everyone is satisfied. Without focus,
    columns get their requirement plus a capped proportional share of any
    spare room, or are scaled down to fit and then raised to their floor.

    Args:
        terminal_width: Terminal width in cells
        required: Required width per column
        focused: Index of the focused column, anything out of range for none
        floors: Minimum width per column when shrinking (default 8 each)

    Returns:
        Width per column, same order as ``required``
    """
    count = len(required)
    if count == 0:
        return []
    if floors is None:
        floors = [DEFAULT_MIN_WIDTH] * count
    available = max(0, terminal_width - (count - 1) - 2)

    if 0 <= focused < count:
        return _focused_widths(available, required, focused)
    return _default_widths(available, required, floors)


def _focused_widths(available: int, required: Sequence[int], focused: int) -> List[int]:
    count = len(required)
    widths = [0] * count
    widths[focused] = min(required[focused] + FOCUS_DECORATION, available)
    others = [i for i in range(count) if i != focused]
    if not others:
        return widths

    remaining = available - widths[focused]
    share = remaining // len(others)
    for i in others:
        widths[i] = min(required[i], share)

    leftover = remaining - sum(widths[i] for i in others)
    # columns still short of their requirement come first
    for i in others:
        if leftover <= 0:
            break
        grow = min(required[i] - widths[i], leftover)
        if grow > 0:
            widths[i] += grow
            leftover -= grow
    while leftover > 0:
        for i in others:
            if leftover <= 0:
                break
            widths[i] += 1
            leftover -= 1
    return widths


def _default_widths(available: int, required: Sequence[int], floors: Sequence[int]) -> List[int]:
    total = sum(required)
    if total <= available:
        widths = list(required)
        extra = available - total
        if total > 0:
            for i in range(len(widths)):
                if extra <= 0:
                    break
                grow = min(required[i] * extra // total, MAX_GROWTH_PER_COLUMN)
                widths[i] += grow
                extra -= grow
        for i in range(len(widths)):
            if extra <= 0:
                break
            widths[i] += 1
            extra -= 1
        return widths

    return [max(req * available // total, floor) for req, floor in zip(required, floors)]


def layout_columns(
    columns: Sequence[Column],
    jobs: Sequence[JobRecord],
    snapshot: Snapshot,
    terminal_width: int,
    focused: int = -1,
) -> List[int]:
    """Compute column widths for ``jobs`` shown with ``columns``."""
    required = [required_width(col, jobs, snapshot) for col in columns]
    floors = [col.min_width for col in columns]
    return compute_widths(terminal_width, required, focused, floors)


def truncate_cell(text: str, width: int, ellipsis: bool = False, focused: bool = False) -> str:
    """Cut ``text`` to ``width``. The focused column is never cut."""
    if focused or len(text) <= width:
        return text
    if ellipsis and width > len(ELLIPSIS):
        return text[: width - len(ELLIPSIS)] + ELLIPSIS
    return text[: max(width, 0)]


def compose_row(cells: Sequence[str], widths: Sequence[int], terminal_width: int, focused: int = -1) -> str:
    """Pad cells to their widths, join with single spaces, clamp to the terminal.

    Only the focused cell may overflow its width; the whole row is then cut to
    ``terminal_width - 2`` which can cut into it on a narrow terminal.
    """
    parts = []
    for i, (cell, width) in enumerate(zip(cells, widths)):
        width = max(width, 0)
        if i != focused:
            cell = cell[:width]
        parts.append(cell.ljust(width))
    return " ".join(parts)[: max(terminal_width - 2, 0)]


def header_cells(columns: Sequence[Column], widths: Sequence[int], focused: int = -1) -> List[str]:
    """Header labels, the focused one wrapped in brackets and cut to its width."""
    cells = []
    for i, (col, width) in enumerate(zip(columns, widths)):
        label = f"[{col.header}]" if i == focused else col.header
        cells.append(label[: max(width, 0)])
    return cells


def row_cells(
    columns: Sequence[Column],
    job: JobRecord,
    snapshot: Snapshot,
    widths: Sequence[int],
    focused: int = -1,
) -> List[str]:
    """Cell texts for one job, truncated for display."""
    return [
        truncate_cell(col.value(job, snapshot), width, col.ellipsis, focused=(i == focused))
        for i, (col, width) in enumerate(zip(columns, widths))
    ]
