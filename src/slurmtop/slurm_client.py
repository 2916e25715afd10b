"""Slurm client for enumerating jobs and fetching their status text."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .utils import run_cmd, which

logger = logging.getLogger(__name__)

MOCK_USER = "alice"


@dataclass
class SlurmCommands:
    """Paths to Slurm commands."""

    squeue: str = "squeue"
    scontrol: str = "scontrol"


class SlurmClient:
    """Client for interacting with a Slurm cluster.

    Implements the job source used by :func:`slurmtop.snapshot.refresh`.
    Command failures are logged and reported as "no data", never raised.
    """

    def __init__(self, cmds: Optional[SlurmCommands] = None, mock_mode: bool = False, timeout: float = 10.0) -> None:
        self.cmds = cmds or SlurmCommands()
        self.timeout = timeout
        self._mock_mode = mock_mode
        if mock_mode:
            return

        missing = []
        for name in ("squeue", "scontrol"):
            found = which(getattr(self.cmds, name))
            if found:
                setattr(self.cmds, name, found)
            else:
                missing.append(getattr(self.cmds, name))
        if missing:
            raise RuntimeError(f"Slurm commands not found: {', '.join(missing)} (use --mock to run without Slurm)")

    def list_owned_job_ids(self, username: str) -> List[str]:
        """Job IDs owned by ``username``, in squeue order."""
        if self._mock_mode:
            # users without sample jobs of their own get the demo user's jobs
            return _mock_owned(username) or _mock_owned(MOCK_USER)
        return self._list_ids([self.cmds.squeue, "-u", username, "-h", "-o", "%i"])

    def list_all_pending_job_ids(self) -> List[str]:
        """Job IDs of every pending job in the cluster."""
        if self._mock_mode:
            return [jid for jid, blob in _MOCK_JOBS.items() if "JobState=PENDING" in blob]
        return self._list_ids([self.cmds.squeue, "-h", "-t", "PD", "-o", "%i"])

    def fetch_status_blob(self, job_id: str) -> str:
        """Raw ``scontrol show job`` output, or ``""`` if the job is gone."""
        if self._mock_mode:
            return _MOCK_JOBS.get(job_id, "")
        rc, out, err = run_cmd([self.cmds.scontrol, "show", "job", job_id], timeout=self.timeout)
        if rc != 0:
            logger.debug("scontrol show job %s failed (exit %s): %s", job_id, rc, err.strip())
            return ""
        return out

    def _list_ids(self, args: List[str]) -> List[str]:
        rc, out, err = run_cmd(args, timeout=self.timeout)
        if rc != 0:
            logger.warning("%s failed (exit %s): %s", " ".join(args), rc, err.strip() or "unknown error")
            return []
        return out.split()


def _mock_blob(job_id: str, user: str, name: str, account: str, state: str, reason: str, runtime: str,
               time_limit: str, priority: int, req_tres: str, alloc_tres: str) -> str:
    return (
        f"JobId={job_id} JobName={name}\n"
        f"   UserId={user}(1000) GroupId={user}(1000) MCS_label=N/A\n"
        f"   Priority={priority} Nice=0 Account={account} QOS=normal\n"
        f"   JobState={state} Reason={reason} Dependency=(null)\n"
        f"   RunTime={runtime} TimeLimit={time_limit} TimeMin=N/A\n"
        f"   Partition=gpu AllocNode:Sid=login01:4242\n"
        f"   ReqTRES={req_tres}\n"
        f"   AllocTRES={alloc_tres}\n"
    )


def _mock_owned(username: str) -> List[str]:
    return [jid for jid, blob in _MOCK_JOBS.items() if f"UserId={username}(" in blob]


_MOCK_JOBS: Dict[str, str] = {
    "12345": _mock_blob("12345", "alice", "train-resnet-50", "vision", "RUNNING", "None", "02:15:30",
                        "1-00:00:00", 0, "cpu=16,mem=64G,node=1,billing=8,gres/gpu:h100=4",
                        "cpu=16,mem=64G,node=1,billing=8,gres/gpu:h100=4"),
    "12346": _mock_blob("12346", "alice", "inference-bert-large", "nlp", "PENDING", "Resources", "00:00:00",
                        "12:00:00", 4210, "cpu=8,mem=32G,node=1,billing=2,gres/gpu:a100=2", ""),
    "12347": _mock_blob("12347", "alice", "data-preprocessing", "vision", "RUNNING", "None", "01:45:12",
                        "06:00:00", 0, "cpu=32,mem=128G,node=1", "cpu=32,mem=128G,node=1"),
    "12348": _mock_blob("12348", "alice", "sweep-lr-0.001", "nlp", "PENDING", "Priority", "00:00:00",
                        "2-00:00:00", 3105, "cpu=4,mem=16G,node=1,gres/gpu=1", ""),
    "12349": _mock_blob("12349", "alice", "eval-checkpoints", "nlp", "COMPLETING", "None", "00:59:58",
                        "01:00:00", 0, "cpu=4,mem=16G,node=1", "cpu=4,mem=16G,node=1,gres/gpu:v100=1"),
    "22001": _mock_blob("22001", "bob", "md-simulation", "chem", "PENDING", "Resources", "00:00:00",
                        "3-00:00:00", 9001, "cpu=64,mem=256G,node=2,gres/gpu:a100=8", ""),
    "22002": _mock_blob("22002", "bob", "md-analysis", "chem", "PENDING", "Dependency", "00:00:00",
                        "04:00:00", 3500, "cpu=8,mem=32G,node=1", ""),
    "22003": _mock_blob("22003", "carol", "held-job", "bio", "PENDING", "JobHeldUser", "00:00:00",
                        "08:00:00", 0, "cpu=2,mem=8G,node=1", ""),
}
