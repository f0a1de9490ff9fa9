"""Job-level models exchanged with the host framework."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, SecretStr

from coderjob.adapter.models.enums import DeletionState, JobStatus

# -- Submission --------------------------------------------------------------


class SubmitRequest(BaseModel):
    """Native attributes of a job script targeting a Coder template."""

    org_id: str
    project_id: str
    template_version_id: str
    workspace_name: str
    parameters: dict[str, Any] = Field(
        default_factory=dict, description="Extra rich parameters; values are sent as text"
    )


class Credentials(BaseModel):
    """Ephemeral application credential bound to one workspace."""

    name: str
    id: str
    secret: SecretStr


# -- Info --------------------------------------------------------------------


class ConnectionInfo(BaseModel):
    host: str | None = None
    port: int = 80
    error_logs: list[list[str]] = Field(default_factory=list)


class JobInfo(BaseModel):
    """Normalized job record built fresh on every query."""

    id: str
    job_name: str | None = None
    status: JobStatus = JobStatus.UNDETERMINED
    job_owner: str | None = None
    submission_time: datetime | None = None
    dispatch_time: datetime | None = None
    wallclock_time: int = 0
    connection_info: ConnectionInfo = Field(default_factory=ConnectionInfo)
    native: dict[str, Any] = Field(default_factory=dict)


# -- Deletion ----------------------------------------------------------------


class DeletionOutcome(BaseModel):
    state: DeletionState
    attempts: int = 0
    last_status: str | None = None
