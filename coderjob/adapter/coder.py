"""Coder job adapter.

Presents Coder workspaces to the host job framework as batch jobs: a job id
is a workspace id, submission creates a workspace from a template version,
deletion tears the workspace down along with its application credentials.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterable
from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import TypeAdapter

from coderjob.adapter.credentials.local import LocalCredentialStore
from coderjob.adapter.gateway import CoderClient
from coderjob.adapter.info import build_job_info
from coderjob.adapter.logs import extract_errors
from coderjob.adapter.managers.deletion import AttemptCallback, delete_workspace
from coderjob.adapter.managers.submission import random_suffix, submit_workspace
from coderjob.adapter.models.workspace import BuildLogEntry

if TYPE_CHECKING:
    import httpx

    from coderjob.adapter.credentials.base import CredentialProvider
    from coderjob.adapter.models.enums import JobStatus
    from coderjob.adapter.models.job import DeletionOutcome, JobInfo, SubmitRequest
    from coderjob.adapter.settings import CoderJobSettings

_log_entries = TypeAdapter(list[BuildLogEntry])


class WorkspaceNotFoundError(LookupError):
    """Raised when the Coder API returns no workspace for an id."""


def _create_credential_provider(settings: CoderJobSettings) -> CredentialProvider:
    """Create the credential provider backend based on configuration."""
    if settings.credential_store == "local":
        return LocalCredentialStore(settings.data_root, prefix=settings.data_prefix)
    msg = f"Unsupported credential store: {settings.credential_store}"
    raise ValueError(msg)


class CoderAdapter:
    """``JobAdapter`` implementation backed by the Coder API.

    Stateless beyond its references to the API client and credential
    provider; every query hits the API.
    """

    def __init__(
        self,
        client: CoderClient,
        credentials: CredentialProvider,
        *,
        username: str,
        service_user: str = "me",
        deletion_max_attempts: int = 5,
        deletion_interval_seconds: float = 10,
        suffix_factory: Callable[[], str] = random_suffix,
    ) -> None:
        self._client = client
        self._credentials = credentials
        self._username = username
        self._service_user = service_user
        self._deletion_max_attempts = deletion_max_attempts
        self._deletion_interval_seconds = deletion_interval_seconds
        self._suffix_factory = suffix_factory

    @classmethod
    def from_settings(
        cls, settings: CoderJobSettings, transport: httpx.AsyncBaseTransport | None = None
    ) -> CoderAdapter:
        return cls(
            CoderClient.from_settings(settings, transport=transport),
            _create_credential_provider(settings),
            username=settings.username,
            service_user=settings.service_user,
            deletion_max_attempts=settings.deletion_max_attempts,
            deletion_interval_seconds=settings.deletion_timeout_interval_seconds,
        )

    async def __aenter__(self) -> CoderAdapter:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self._client.aclose()

    # -- Lifecycle -------------------------------------------------------------

    async def submit(self, request: SubmitRequest) -> str:
        return await submit_workspace(
            self._client,
            self._credentials,
            request,
            username=self._username,
            service_user=self._service_user,
            suffix_factory=self._suffix_factory,
        )

    async def delete(self, job_id: str, on_attempt: AttemptCallback | None = None) -> DeletionOutcome:
        return await delete_workspace(
            self._client,
            self._credentials,
            job_id,
            max_attempts=self._deletion_max_attempts,
            interval_seconds=self._deletion_interval_seconds,
            on_attempt=on_attempt,
        )

    async def info(self, job_id: str) -> JobInfo:
        data = await self._client.get_workspace(job_id)
        if not data:
            raise WorkspaceNotFoundError(job_id)
        return await self._info_from_json(data)

    async def status(self, job_id: str) -> JobStatus:
        return (await self.info(job_id)).status

    # -- Enumeration -----------------------------------------------------------

    async def info_all(self) -> list[JobInfo]:
        return [info async for info in self.info_all_each()]

    async def info_where_owner(self, owner: str | Iterable[str]) -> list[JobInfo]:
        return [info async for info in self.info_where_owner_each(owner)]

    async def info_all_each(self) -> AsyncIterator[JobInfo]:
        for data in await self._client.list_workspaces():
            yield await self._info_from_json(data)

    async def info_where_owner_each(self, owner: str | Iterable[str]) -> AsyncIterator[JobInfo]:
        owners = {owner} if isinstance(owner, str) else {str(o) for o in owner}
        async for info in self.info_all_each():
            if info.job_owner in owners:
                yield info

    def supports_job_arrays(self) -> bool:
        return False

    # -- Helpers ---------------------------------------------------------------

    async def _info_from_json(self, data: dict[str, Any]) -> JobInfo:
        build_id = (data.get("latest_build") or {}).get("id")
        error_logs: list[list[str]] = []
        if build_id:
            entries = _log_entries.validate_python(await self._client.get_build_logs(build_id))
            error_logs = extract_errors(entries)
            if error_logs:
                logger.debug("Build {} reported {} error line(s)", build_id, len(error_logs))
        return build_job_info(data, error_logs)
