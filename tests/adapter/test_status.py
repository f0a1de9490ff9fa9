"""Unit tests for the Coder state -> job status mapping."""

from __future__ import annotations

import pytest

from coderjob.adapter.models.enums import JobStatus
from coderjob.adapter.status import remote_state_to_status


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        ("starting", JobStatus.QUEUED),
        ("failed", JobStatus.SUSPENDED),
        ("running", JobStatus.RUNNING),
        ("deleted", JobStatus.COMPLETED),
        ("stopped", JobStatus.COMPLETED),
        ("deleting", JobStatus.UNDETERMINED),
        ("pending", JobStatus.UNDETERMINED),
        ("", JobStatus.UNDETERMINED),
        (None, JobStatus.UNDETERMINED),
    ],
)
def test_remote_state_to_status(state: str | None, expected: JobStatus) -> None:
    assert remote_state_to_status(state) is expected


def test_status_values_match_host_taxonomy() -> None:
    assert {s.value for s in JobStatus} == {
        "queued",
        "queued_held",
        "running",
        "suspended",
        "completed",
        "undetermined",
    }
