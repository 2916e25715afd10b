"""Utility functions for slurmtop."""

import os
import subprocess
from typing import List, Optional, Tuple


def which(cmd: str) -> Optional[str]:
    """Find the full path of a command in PATH."""
    if os.path.isabs(cmd):
        return cmd if os.path.isfile(cmd) and os.access(cmd, os.X_OK) else None
    for path in os.environ.get("PATH", "").split(os.pathsep):
        full = os.path.join(path, cmd)
        if os.path.isfile(full) and os.access(full, os.X_OK):
            return full
    return None


def run_cmd(args: List[str], timeout: float = 10.0) -> Tuple[int, str, str]:
    """Run a command synchronously with timeout.

    Args:
        args: Command and arguments (no shell involved)
        timeout: Timeout in seconds

    Returns:
        Tuple of (return_code, stdout, stderr)
    """
    try:
        proc = subprocess.run(args, capture_output=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        return 124, "", f"Timeout after {timeout}s for: {' '.join(args)}"
    except OSError as e:
        return 127, "", str(e)
    return proc.returncode, proc.stdout.decode(errors="ignore"), proc.stderr.decode(errors="ignore")
