"""Local filesystem credential provider.

Stores one JSON document per workspace under a unified data root with
optional namespace prefix::

    {data_root}/{prefix}/credentials/{workspace_id}.json

When prefix is None, the path collapses to::

    {data_root}/credentials/{workspace_id}.json

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.  Writes are
atomic (temp file + rename) and files are created with mode 0600.

Credentials are generated locally (random id and secret), which suits
templates that only need an opaque per-workspace token.
"""

from __future__ import annotations

import contextlib
import json
import os
import secrets
import tempfile
import uuid
from functools import partial
from pathlib import Path

from anyio import to_thread
from loguru import logger

from coderjob.adapter.credentials.base import CredentialProviderError, CredentialsNotFoundError
from coderjob.adapter.models.job import Credentials


class LocalCredentialStore:
    """Local filesystem implementation of the CredentialProvider protocol."""

    def __init__(self, data_root: str | Path, prefix: str | None = None) -> None:
        base = Path(data_root)
        if prefix:
            base = base / prefix
        self._base = base / "credentials"

    def _path(self, workspace_id: str) -> Path:
        return self._base / f"{workspace_id}.json"

    # -- Generate --------------------------------------------------------------

    async def generate_credentials(self, project_id: str) -> Credentials:
        credential_id = uuid.uuid4().hex
        credentials = Credentials(
            name=f"coderjob-{project_id}-{credential_id[:8]}",
            id=credential_id,
            secret=secrets.token_urlsafe(32),
        )
        logger.debug("Generated credentials {} for project {}", credentials.id, project_id)
        return credentials

    # -- Write -----------------------------------------------------------------

    async def save_credentials(self, workspace_id: str, credentials: Credentials) -> None:
        data = json.dumps(
            {"name": credentials.name, "id": credentials.id, "secret": credentials.secret.get_secret_value()},
            indent=2,
        )
        try:
            await to_thread.run_sync(partial(_atomic_write, self._path(workspace_id), data))
        except OSError as exc:
            msg = f"Cannot save credentials for workspace {workspace_id}: {exc}"
            raise CredentialProviderError(msg) from exc

    # -- Read ------------------------------------------------------------------

    async def load_credentials(self, workspace_id: str) -> Credentials:
        path = self._path(workspace_id)
        try:
            raw = await to_thread.run_sync(partial(path.read_text, encoding="utf-8"))
        except FileNotFoundError:
            msg = f"No credentials stored for workspace {workspace_id}"
            raise CredentialsNotFoundError(msg) from None
        return Credentials.model_validate_json(raw)

    # -- Destroy ---------------------------------------------------------------

    async def destroy_credentials(self, credentials: Credentials, last_state: str | None, workspace_id: str) -> None:
        path = self._path(workspace_id)
        await to_thread.run_sync(partial(_unlink, path))
        logger.info(
            "Credentials {} destroyed for workspace {} (last state={})", credentials.id, workspace_id, last_state
        )

    async def exists(self, workspace_id: str) -> bool:
        return await to_thread.run_sync(self._path(workspace_id).exists)


# -- Sync helpers (run in thread pool) -----------------------------------------


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.rename(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def _unlink(path: Path) -> None:
    """Remove file.  No-op if it doesn't exist."""
    path.unlink(missing_ok=True)
