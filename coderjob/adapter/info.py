"""Job info construction from raw workspace JSON.

Builds the normalized ``JobInfo`` record: canonical status, connection
details from the ``coder_output`` resource metadata, and timing fields the
Coder API does not report directly.

Wallclock time runs from the workspace ``updated_at``.  It stops at the
latest build ``updated_at`` only when the raw build state is ``deleted``;
a ``stopped`` workspace maps to ``completed`` but its clock keeps running.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from coderjob.adapter.models.job import ConnectionInfo, JobInfo
from coderjob.adapter.models.workspace import Workspace, WorkspaceBuild
from coderjob.adapter.status import remote_state_to_status

OUTPUT_RESOURCE = "coder_output"
CONNECTION_PORT = 80

_datetime_adapter = TypeAdapter(datetime)


class MalformedTimestampError(ValueError):
    """Raised when a timestamp field is missing or not a valid date-time."""


def parse_timestamp(value: str | None, field: str = "timestamp") -> datetime:
    """Parse an RFC 3339 timestamp.  Naive values are taken as UTC."""
    if not value:
        msg = f"Missing {field}"
        raise MalformedTimestampError(msg)
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError as exc:
        msg = f"Invalid {field}: {value!r}"
        raise MalformedTimestampError(msg) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def output_metadata(build: WorkspaceBuild) -> dict[str, Any]:
    """Flatten the ``coder_output`` resource metadata into a dict (empty if absent)."""
    for resource in build.resources or []:
        if resource.name == OUTPUT_RESOURCE:
            return {meta.key: meta.value for meta in resource.metadata or []}
    return {}


def wallclock_time(workspace: Workspace, state: str | None, now: datetime | None = None) -> int:
    """Seconds between the workspace update and the deletion build (or now)."""
    start = int(parse_timestamp(workspace.updated_at, "workspace updated_at").timestamp())
    if state == "deleted":
        end = int(parse_timestamp(workspace.latest_build.updated_at, "build updated_at").timestamp())
    else:
        end = int((now or datetime.now(UTC)).timestamp())
    return end - start


def build_job_info(
    workspace_json: dict[str, Any],
    error_logs: list[list[str]] | None = None,
    now: datetime | None = None,
) -> JobInfo:
    """Assemble ``JobInfo`` from a workspace payload and its extracted build errors."""
    workspace = Workspace.model_validate(workspace_json)
    state = workspace.latest_build.state
    native = output_metadata(workspace.latest_build)

    return JobInfo(
        id=workspace.id,
        job_name=workspace.name,
        status=remote_state_to_status(state),
        job_owner=workspace.owner_name,
        submission_time=parse_timestamp(workspace.created_at, "created_at") if workspace.created_at else None,
        dispatch_time=parse_timestamp(workspace.updated_at, "workspace updated_at"),
        wallclock_time=wallclock_time(workspace, state, now),
        connection_info=ConnectionInfo(
            host=native.get("floating_ip"),
            port=CONNECTION_PORT,
            error_logs=error_logs or [],
        ),
        native=native,
    )
