"""Tests for slurmtop.snapshot module."""

from conftest import FakeSource, make_blob
from slurmtop.models import Snapshot
from slurmtop.snapshot import refresh


class TestRefresh:
    """Tests for snapshot aggregation."""

    def test_counts(self, snapshot: Snapshot) -> None:
        """Test running, pending and total counts."""
        assert snapshot.username == "alice"
        assert snapshot.total_jobs == 5
        assert snapshot.running_jobs == 2
        assert snapshot.pending_jobs == 2

    def test_total_matches_jobs(self, snapshot: Snapshot) -> None:
        assert snapshot.total_jobs == len(snapshot.jobs)
        assert snapshot.running_jobs + snapshot.pending_jobs <= snapshot.total_jobs

    def test_discovery_order(self, snapshot: Snapshot) -> None:
        assert [j.job_id for j in snapshot.jobs] == ["100", "101", "102", "103", "104"]

    def test_gpu_totals(self, snapshot: Snapshot) -> None:
        """Test that GPUs are summed per type for running and pending jobs only."""
        assert snapshot.gpu_type_count == {"v100": 4}
        assert snapshot.gpu_type_requested == {"a100": 2, "generic": 1}

    def test_vanished_job_skipped(self, snapshot: Snapshot) -> None:
        """Test that a job whose status fetch is empty is dropped silently."""
        assert "105" not in [j.job_id for j in snapshot.jobs]
        assert snapshot.dropped_jobs == 1

    def test_global_ranking_sorted(self, snapshot: Snapshot) -> None:
        priorities = [j.priority for j in snapshot.all_pending_jobs]
        assert priorities == sorted(priorities, reverse=True)
        assert all(p > 0 for p in priorities)

    def test_global_ranking_members(self, snapshot: Snapshot) -> None:
        """Test that zero-priority jobs are left out and own jobs are not deduplicated."""
        assert [j.job_id for j in snapshot.all_pending_jobs] == ["200", "103", "201", "102"]

    def test_fetched_at_set(self, snapshot: Snapshot) -> None:
        assert snapshot.fetched_at is not None

    def test_single_running_gpu_job(self) -> None:
        """Test the end-to-end path for one running V100 job."""
        blob = make_blob("1", "RUNNING", alloc_tres="cpu=4,mem=16G,gres/gpu:v100=4")
        snap = refresh("alice", FakeSource(owned=["1"], pending=[], blobs={"1": blob}))
        assert snap.running_jobs == 1
        assert snap.pending_jobs == 0
        assert snap.gpu_type_count == {"v100": 4}
        assert snap.gpu_type_requested == {}

    def test_gpu_totals_accumulate(self) -> None:
        blobs = {
            "1": make_blob("1", "RUNNING", alloc_tres="gres/gpu:a100=2"),
            "2": make_blob("2", "RUNNING", alloc_tres="gres/gpu:a100=3"),
            "3": make_blob("3", "RUNNING", alloc_tres="cpu=1"),
        }
        snap = refresh("alice", FakeSource(owned=["1", "2", "3"], pending=[], blobs=blobs))
        assert snap.gpu_type_count == {"a100": 5}

    def test_vanished_queue_job_not_counted(self) -> None:
        """Test that a vanished job from the cluster-wide queue is not counted as the user's."""
        blobs = {"1": make_blob("1", "RUNNING")}
        snap = refresh("alice", FakeSource(owned=["1"], pending=["99"], blobs=blobs))
        assert snap.dropped_jobs == 0
        assert snap.all_pending_jobs == []

    def test_empty_cluster(self) -> None:
        snap = refresh("alice", FakeSource(owned=[], pending=[], blobs={}))
        assert snap.jobs == []
        assert snap.all_pending_jobs == []
        assert snap.total_jobs == 0
        assert snap.dropped_jobs == 0

    def test_refresh_builds_new_snapshot(self, fake_source: FakeSource) -> None:
        """Test that every refresh starts from scratch."""
        first = refresh("alice", fake_source)
        second = refresh("alice", fake_source)
        assert first is not second
        assert second.total_jobs == first.total_jobs
        assert second.gpu_type_count == {"v100": 4}


class TestSnapshotHelpers:
    """Tests for Snapshot view helpers."""

    def test_running(self, snapshot: Snapshot) -> None:
        assert [j.job_id for j in snapshot.running()] == ["100", "101"]

    def test_pending_sorted_by_priority(self, snapshot: Snapshot) -> None:
        assert [j.job_id for j in snapshot.pending()] == ["103", "102"]

    def test_higher_priority_count(self, snapshot: Snapshot) -> None:
        """Test counting cluster-wide pending jobs with strictly higher priority."""
        by_id = {j.job_id: j for j in snapshot.jobs}
        assert snapshot.higher_priority_count(by_id["103"]) == 1
        assert snapshot.higher_priority_count(by_id["102"]) == 3
