"""Pytest fixtures for slurmtop tests."""

from typing import Dict, List

import pytest

from slurmtop.models import Snapshot
from slurmtop.slurm_client import SlurmClient
from slurmtop.snapshot import refresh


def make_blob(
    job_id: str,
    state: str = "RUNNING",
    name: str = "job",
    account: str = "acct",
    reason: str = "None",
    runtime: str = "00:10:00",
    time_limit: str = "01:00:00",
    priority: str = "0",
    req_tres: str = "cpu=1,mem=4G,node=1",
    alloc_tres: str = "cpu=1,mem=4G,node=1",
) -> str:
    """A minimal ``scontrol show job`` blob."""
    return (
        f"JobId={job_id} JobName={name}\n"
        f"   UserId=alice(1000) GroupId=alice(1000)\n"
        f"   Priority={priority} Nice=0 Account={account} QOS=normal\n"
        f"   JobState={state} Reason={reason} Dependency=(null)\n"
        f"   RunTime={runtime} TimeLimit={time_limit} TimeMin=N/A\n"
        f"   ReqTRES={req_tres}\n"
        f"   AllocTRES={alloc_tres}\n"
    )


class FakeSource:
    """In-memory job source. Missing blobs behave like vanished jobs."""

    def __init__(self, owned: List[str], pending: List[str], blobs: Dict[str, str]) -> None:
        self.owned = owned
        self.pending = pending
        self.blobs = blobs
        self.fetches: List[str] = []

    def list_owned_job_ids(self, username: str) -> List[str]:
        return list(self.owned)

    def list_all_pending_job_ids(self) -> List[str]:
        return list(self.pending)

    def fetch_status_blob(self, job_id: str) -> str:
        self.fetches.append(job_id)
        return self.blobs.get(job_id, "")


@pytest.fixture
def slurm_client() -> SlurmClient:
    """Create a SlurmClient in mock mode for testing."""
    return SlurmClient(mock_mode=True)


@pytest.fixture
def sample_blobs() -> Dict[str, str]:
    """Status blobs for a small cluster."""
    return {
        "100": make_blob("100", "RUNNING", name="train", alloc_tres="cpu=4,mem=16G,gres/gpu:v100=4"),
        "101": make_blob("101", "RUNNING", name="prep", alloc_tres="cpu=4,mem=16G"),
        "102": make_blob(
            "102",
            "PENDING",
            name="sweep",
            reason="Priority",
            runtime="00:00:00",
            priority="500",
            req_tres="cpu=2,gres/gpu:a100=2",
            alloc_tres="",
        ),
        "103": make_blob(
            "103",
            "PENDING",
            name="eval",
            reason="Resources",
            runtime="00:00:00",
            priority="900",
            req_tres="cpu=2,gres/gpu=1",
            alloc_tres="",
        ),
        "104": make_blob("104", "COMPLETING", name="done", alloc_tres="cpu=1,gres/gpu:v100=1"),
        "200": make_blob("200", "PENDING", priority="1000", req_tres="cpu=1,gres/gpu:a100=8"),
        "201": make_blob("201", "PENDING", priority="700"),
        "202": make_blob("202", "PENDING", priority="0", reason="JobHeldUser"),
    }


@pytest.fixture
def fake_source(sample_blobs: Dict[str, str]) -> FakeSource:
    """Owned jobs 100-104 (plus a vanished 105), queue 102, 103, 200-202."""
    return FakeSource(
        owned=["100", "101", "102", "103", "104", "105"],
        pending=["102", "103", "200", "201", "202"],
        blobs=sample_blobs,
    )


@pytest.fixture
def snapshot(fake_source: FakeSource) -> Snapshot:
    """Snapshot built from ``fake_source``."""
    return refresh("alice", fake_source)
