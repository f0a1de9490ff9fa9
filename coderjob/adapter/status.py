"""Coder build state -> canonical job status.

The mapping is coarser than Coder's own vocabulary: ``failed`` surfaces as
``suspended`` because the host taxonomy has no failure state.
"""

from __future__ import annotations

from coderjob.adapter.models.enums import JobStatus

_STATE_MAP: dict[str, JobStatus] = {
    "starting": JobStatus.QUEUED,
    "failed": JobStatus.SUSPENDED,
    "running": JobStatus.RUNNING,
    "deleted": JobStatus.COMPLETED,
    "stopped": JobStatus.COMPLETED,
}


def remote_state_to_status(state: str | None) -> JobStatus:
    """Map a Coder build status to ``JobStatus``.  Unknown states are ``undetermined``."""
    if state is None:
        return JobStatus.UNDETERMINED
    return _STATE_MAP.get(state, JobStatus.UNDETERMINED)
