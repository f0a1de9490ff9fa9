"""Job adapter interface presented to the host job framework.

Lists exactly the lifecycle and enumeration operations the framework calls.
Test doubles must implement all of them.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from typing import Protocol, runtime_checkable

from coderjob.adapter.models.enums import JobStatus
from coderjob.adapter.models.job import DeletionOutcome, JobInfo, SubmitRequest


@runtime_checkable
class JobAdapter(Protocol):
    async def submit(self, request: SubmitRequest) -> str:
        """Submit a job and return its id."""
        ...

    async def info(self, job_id: str) -> JobInfo:
        """Return a fresh info record for ``job_id``."""
        ...

    async def status(self, job_id: str) -> JobStatus: ...

    async def delete(self, job_id: str) -> DeletionOutcome:
        """Delete the job and release everything bound to it."""
        ...

    async def info_all(self) -> list[JobInfo]: ...

    async def info_where_owner(self, owner: str | Iterable[str]) -> list[JobInfo]: ...

    def info_all_each(self) -> AsyncIterator[JobInfo]: ...

    def info_where_owner_each(self, owner: str | Iterable[str]) -> AsyncIterator[JobInfo]: ...

    def supports_job_arrays(self) -> bool: ...
