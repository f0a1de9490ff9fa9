"""Shared enumerations used across the adapter."""

from __future__ import annotations

from enum import StrEnum

# -- Job ---------------------------------------------------------------------


class JobStatus(StrEnum):
    """Canonical status taxonomy understood by the host job framework."""

    QUEUED = "queued"
    QUEUED_HELD = "queued_held"
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    UNDETERMINED = "undetermined"


# -- Deletion ----------------------------------------------------------------


class DeletionState(StrEnum):
    """States of the workspace deletion flow."""

    REQUESTED = "requested"
    DELETING = "deleting"
    DELETED = "deleted"
    TIMED_OUT = "timed_out"
