"""Tolerant parsing of ``scontrol show job`` output into job records.

Nothing in here raises on malformed input: a missing field becomes an empty
string and a number that does not parse becomes 0.
"""

import re
from typing import Tuple

from .models import GENERIC_GPU_TYPE, NO_GPU_TYPE, JobRecord, JobState

TYPED_GPU_TOKEN = "gres/gpu:"
UNTYPED_GPU_TOKEN = "gres/gpu="
_COUNT_TERMINATORS = " ,\n"
_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


def strip_control_chars(text: str) -> str:
    """Keep printable ASCII, turn tabs into spaces, drop everything else."""
    out = []
    for ch in text:
        code = ord(ch)
        if 32 <= code <= 126:
            out.append(ch)
        elif ch == "\t":
            out.append(" ")
    return "".join(out)


def parse_int(text: str) -> int:
    """Parse a leading integer (``"4(IDX:0-3)"`` gives 4), 0 when there is none."""
    match = _INT_PREFIX.match(text)
    if match:
        return int(match.group(1))
    return 0


def extract_field(blob: str, field_name: str) -> str:
    """Return the sanitized value of ``field_name=`` in ``blob``, or ``""``.

    The value ends at the next space, or failing that the next newline, or the
    end of the blob.
    """
    pos = blob.find(field_name + "=")
    if pos < 0:
        return ""
    pos += len(field_name) + 1
    end = blob.find(" ", pos)
    if end < 0:
        end = blob.find("\n", pos)
    if end < 0:
        end = len(blob)
    return strip_control_chars(blob[pos:end])


def _find_first_of(blob: str, chars: str, start: int) -> int:
    hits = [i for i in (blob.find(c, start) for c in chars) if i >= 0]
    return min(hits) if hits else len(blob)


def extract_gpu_info(blob: str, field_name: str) -> Tuple[int, str]:
    """Extract ``(gpu_count, gpu_type)`` from a TRES field such as AllocTRES.

    The typed form ``gres/gpu:<type>=<n>`` is looked for first, then the
    untyped ``gres/gpu=<n>``. Both searches start at the field and run to the
    end of the blob. Defaults to ``(0, "N/A")``.
    """
    field_pos = blob.find(field_name + "=")
    if field_pos < 0:
        return 0, NO_GPU_TYPE

    typed_pos = blob.find(TYPED_GPU_TOKEN, field_pos)
    if typed_pos >= 0:
        type_start = typed_pos + len(TYPED_GPU_TOKEN)
        type_end = blob.find("=", type_start)
        if type_end >= 0:
            gpu_type = strip_control_chars(blob[type_start:type_end])
            count_start = type_end + 1
            count_end = _find_first_of(blob, _COUNT_TERMINATORS, count_start)
            return max(0, parse_int(blob[count_start:count_end])), gpu_type

    untyped_pos = blob.find(UNTYPED_GPU_TOKEN, field_pos)
    if untyped_pos >= 0:
        count_start = untyped_pos + len(UNTYPED_GPU_TOKEN)
        count_end = _find_first_of(blob, _COUNT_TERMINATORS, count_start)
        return max(0, parse_int(blob[count_start:count_end])), GENERIC_GPU_TYPE

    return 0, NO_GPU_TYPE


def parse_job(job_id: str, blob: str) -> JobRecord:
    """Build a JobRecord from one ``scontrol show job`` blob.

    Running jobs only report GPUs from AllocTRES. Any other state tries
    ReqTRES first and falls back to AllocTRES when no GPU was requested.
    """
    state = extract_field(blob, "JobState")
    if JobState.classify(state) is JobState.RUNNING:
        gpu_count, gpu_type = extract_gpu_info(blob, "AllocTRES")
    else:
        gpu_count, gpu_type = extract_gpu_info(blob, "ReqTRES")
        if gpu_count == 0:
            gpu_count, gpu_type = extract_gpu_info(blob, "AllocTRES")

    return JobRecord(
        job_id=job_id,
        job_name=extract_field(blob, "JobName"),
        account=extract_field(blob, "Account"),
        state=state,
        reason=extract_field(blob, "Reason"),
        runtime=extract_field(blob, "RunTime"),
        time_limit=extract_field(blob, "TimeLimit"),
        gpu_count=gpu_count,
        gpu_type=gpu_type,
        priority=parse_int(extract_field(blob, "Priority")),
    )
