"""Job records and refresh snapshots."""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

NO_GPU_TYPE = "N/A"
GENERIC_GPU_TYPE = "generic"


class JobState(str, Enum):
    """Job states the dashboard branches on. Anything else is OTHER."""

    RUNNING = "RUNNING"
    PENDING = "PENDING"
    OTHER = "OTHER"

    @classmethod
    def classify(cls, state: str) -> "JobState":
        if state == cls.RUNNING.value:
            return cls.RUNNING
        if state == cls.PENDING.value:
            return cls.PENDING
        return cls.OTHER


@dataclass(frozen=True)
class JobRecord:
    """One scheduler job, as parsed from a single status blob."""

    job_id: str
    job_name: str = ""
    account: str = ""
    state: str = ""
    reason: str = ""
    runtime: str = ""
    time_limit: str = ""
    gpu_count: int = 0
    gpu_type: str = NO_GPU_TYPE
    priority: int = 0

    @property
    def kind(self) -> JobState:
        return JobState.classify(self.state)


@dataclass
class Snapshot:
    """Complete result of one refresh pass.

    ``jobs`` holds the user's own jobs in discovery order. ``all_pending_jobs``
    holds every pending job in the cluster with a positive priority, sorted by
    descending priority, and is only used for ranking. The two lists are not
    deduplicated against each other.
    """

    username: str
    jobs: List[JobRecord] = field(default_factory=list)
    all_pending_jobs: List[JobRecord] = field(default_factory=list)
    total_jobs: int = 0
    running_jobs: int = 0
    pending_jobs: int = 0
    gpu_type_count: Dict[str, int] = field(default_factory=dict)
    gpu_type_requested: Dict[str, int] = field(default_factory=dict)
    dropped_jobs: int = 0
    fetched_at: Optional[datetime.datetime] = None

    def running(self) -> List[JobRecord]:
        """Owned jobs in RUNNING state, in discovery order."""
        return [j for j in self.jobs if j.kind is JobState.RUNNING]

    def pending(self) -> List[JobRecord]:
        """Owned jobs in PENDING state, highest priority first."""
        pending = [j for j in self.jobs if j.kind is JobState.PENDING]
        return sorted(pending, key=lambda j: j.priority, reverse=True)

    def higher_priority_count(self, job: JobRecord) -> int:
        """Number of queued jobs cluster-wide that outrank ``job``."""
        return sum(1 for other in self.all_pending_jobs if other.priority > job.priority)
