"""Snapshot aggregation: one full, synchronous pass over the queue."""

import datetime
import logging
from typing import List, Optional, Protocol

from .models import JobRecord, JobState, Snapshot
from .parser import parse_job

logger = logging.getLogger(__name__)


class JobSource(Protocol):
    """Where job identifiers and status blobs come from."""

    def list_owned_job_ids(self, username: str) -> List[str]: ...

    def list_all_pending_job_ids(self) -> List[str]: ...

    def fetch_status_blob(self, job_id: str) -> str: ...


def _fetch(source: JobSource, job_id: str) -> Optional[JobRecord]:
    """Fetch and parse one job; None when it vanished after enumeration."""
    blob = source.fetch_status_blob(job_id)
    if not blob:
        logger.debug("job %s disappeared before its status could be fetched", job_id)
        return None
    return parse_job(job_id, blob)


def refresh(username: str, source: JobSource) -> Snapshot:
    """Build a brand-new snapshot for ``username``.

    Owned jobs whose status fetch comes back empty are skipped and counted in
    ``dropped_jobs``; vanished entries of the cluster-wide queue are just left
    out of the ranking. Nothing in here raises on malformed scheduler output.
    """
    snap = Snapshot(username=username)

    for job_id in source.list_owned_job_ids(username):
        job = _fetch(source, job_id)
        if job is None:
            snap.dropped_jobs += 1
            continue
        snap.jobs.append(job)

        if job.kind is JobState.RUNNING:
            snap.running_jobs += 1
            if job.gpu_count > 0:
                snap.gpu_type_count[job.gpu_type] = snap.gpu_type_count.get(job.gpu_type, 0) + job.gpu_count
        elif job.kind is JobState.PENDING:
            snap.pending_jobs += 1
            if job.gpu_count > 0:
                snap.gpu_type_requested[job.gpu_type] = (
                    snap.gpu_type_requested.get(job.gpu_type, 0) + job.gpu_count
                )

    snap.total_jobs = len(snap.jobs)

    for job_id in source.list_all_pending_job_ids():
        job = _fetch(source, job_id)
        if job is None:
            continue
        if job.priority > 0:
            snap.all_pending_jobs.append(job)

    snap.all_pending_jobs.sort(key=lambda j: j.priority, reverse=True)
    snap.fetched_at = datetime.datetime.now()

    if snap.dropped_jobs:
        logger.info("refresh for %s dropped %d vanished job(s)", username, snap.dropped_jobs)
    logger.debug(
        "refresh for %s: %d jobs (%d running, %d pending), %d ranked pending",
        username,
        snap.total_jobs,
        snap.running_jobs,
        snap.pending_jobs,
        len(snap.all_pending_jobs),
    )
    return snap
