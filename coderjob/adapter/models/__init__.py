"""Data models for the Coder job adapter."""

from coderjob.adapter.models.enums import DeletionState, JobStatus
from coderjob.adapter.models.job import (
    ConnectionInfo,
    Credentials,
    DeletionOutcome,
    JobInfo,
    SubmitRequest,
)
from coderjob.adapter.models.workspace import (
    BuildJob,
    BuildLogEntry,
    ResourceMetadata,
    Workspace,
    WorkspaceBuild,
    WorkspaceResource,
)

__all__ = [
    "BuildJob",
    "BuildLogEntry",
    "ConnectionInfo",
    "Credentials",
    "DeletionOutcome",
    "DeletionState",
    "JobInfo",
    "JobStatus",
    "ResourceMetadata",
    "SubmitRequest",
    "Workspace",
    "WorkspaceBuild",
    "WorkspaceResource",
]
