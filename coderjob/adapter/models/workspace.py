"""Workspace data models.

Mirror the subset of the Coder ``/api/v2`` workspace payload the adapter
reads.  Unknown fields are ignored; timestamps stay as raw strings so the
info builder can report malformed values explicitly.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ResourceMetadata(BaseModel):
    key: str
    value: str | None = None


class WorkspaceResource(BaseModel):
    """A provisioned resource of a build (e.g. the ``coder_output`` null resource)."""

    name: str
    metadata: list[ResourceMetadata] | None = None


class BuildJob(BaseModel):
    status: str | None = None


class WorkspaceBuild(BaseModel):
    """One provisioning transition (start, stop, delete) of a workspace."""

    id: str | None = None
    status: str | None = None
    updated_at: str | None = None
    resources: list[WorkspaceResource] | None = None
    job: BuildJob | None = None

    @property
    def state(self) -> str | None:
        """Build status, falling back to the provisioner job status."""
        if self.status:
            return self.status
        return self.job.status if self.job else None


class Workspace(BaseModel):
    """Workspace as returned by ``GET /api/v2/workspaces/{id}``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "workspace_name"))
    owner_name: str | None = Field(default=None, validation_alias=AliasChoices("owner_name", "workspace_owner_name"))
    created_at: str | None = None
    updated_at: str | None = None
    latest_build: WorkspaceBuild = Field(default_factory=WorkspaceBuild)


class BuildLogEntry(BaseModel):
    """One line of provisioner output.  Immutable."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    output: str | None = ""
    log_level: str | None = None
    stage: str | None = None
