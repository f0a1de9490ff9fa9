"""Workspace deletion.

State machine::

    requested -> deleting -> deleted
                          -> timed_out

The delete transition is issued once, then the workspace is polled until its
latest build leaves ``deleting`` or the attempt budget runs out.  Both
terminal states tear down the workspace credentials exactly once; running
out of attempts is not an error.

A transport error while polling (other than the workspace being gone)
aborts the whole flow before teardown.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import anyio
from loguru import logger

from coderjob.adapter.gateway import TransportError
from coderjob.adapter.models.enums import DeletionState
from coderjob.adapter.models.job import DeletionOutcome

if TYPE_CHECKING:
    from coderjob.adapter.credentials.base import CredentialProvider
    from coderjob.adapter.gateway import CoderClient

DELETING = "deleting"
_GONE_STATUS_CODES = frozenset({404, 410})

AttemptCallback = Callable[[int], None]


async def _read_build_status(client: CoderClient, workspace_id: str) -> tuple[bool, str | None]:
    """Return ``(exists, latest build status)`` for the workspace."""
    try:
        data = await client.get_workspace(workspace_id)
    except TransportError as exc:
        if exc.status_code in _GONE_STATUS_CODES:
            return False, None
        raise
    if not data:
        return False, None
    return True, (data.get("latest_build") or {}).get("status")


async def wait_for_deletion(
    client: CoderClient,
    workspace_id: str,
    *,
    max_attempts: int = 5,
    interval_seconds: float = 10,
    on_attempt: AttemptCallback | None = None,
) -> DeletionOutcome:
    """Poll until the latest build is no longer ``deleting``.

    ``on_attempt`` receives the 1-based attempt number each time the
    workspace is still deleting; raising from it cancels the wait.
    """
    logger.debug("Workspace {}: {}", workspace_id, DeletionState.DELETING)
    last_status: str | None = None
    for attempt in range(1, max_attempts + 1):
        exists, last_status = await _read_build_status(client, workspace_id)
        if not exists or last_status != DELETING:
            logger.debug("Workspace {} left deleting after {} read(s)", workspace_id, attempt)
            return DeletionOutcome(state=DeletionState.DELETED, attempts=attempt, last_status=last_status)

        if on_attempt is not None:
            on_attempt(attempt)
        if attempt < max_attempts:
            await anyio.sleep(interval_seconds)

    logger.warning("Workspace {} still deleting after {} attempts", workspace_id, max_attempts)
    return DeletionOutcome(state=DeletionState.TIMED_OUT, attempts=max_attempts, last_status=last_status)


async def delete_workspace(
    client: CoderClient,
    credentials: CredentialProvider,
    workspace_id: str,
    *,
    max_attempts: int = 5,
    interval_seconds: float = 10,
    on_attempt: AttemptCallback | None = None,
) -> DeletionOutcome:
    """Delete a workspace and destroy its credentials."""
    await client.create_delete_build(workspace_id)
    logger.info("Workspace {}: {}", workspace_id, DeletionState.REQUESTED)

    app_credentials = await credentials.load_credentials(workspace_id)
    logger.debug("Credentials loaded: {}", app_credentials.id)

    def _log_attempt(attempt: int) -> None:
        logger.info("Deleting workspace {} (attempt {}/{})", workspace_id, attempt, max_attempts)

    outcome = await wait_for_deletion(
        client,
        workspace_id,
        max_attempts=max_attempts,
        interval_seconds=interval_seconds,
        on_attempt=on_attempt or _log_attempt,
    )

    await credentials.destroy_credentials(app_credentials, outcome.last_status, workspace_id)
    logger.info("Workspace {} deletion finished: {}", workspace_id, outcome.state)
    return outcome
