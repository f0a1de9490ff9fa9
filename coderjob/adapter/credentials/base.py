"""Credential provider interface.

A credential provider issues short-lived application credentials scoped to
one backing project, keeps the binding between a workspace id and its
credentials, and tears them down once the workspace is gone.  The interface
is async so implementations can call remote identity services.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from coderjob.adapter.models.job import Credentials


class CredentialProviderError(RuntimeError):
    """Raised by a credential provider when an operation fails."""


class CredentialsNotFoundError(CredentialProviderError, LookupError):
    """Raised when no credentials are bound to a workspace id."""


@runtime_checkable
class CredentialProvider(Protocol):
    """Async protocol for the credential lifecycle of a workspace.

    At most one credential bundle is bound to a workspace id at any time.
    """

    async def generate_credentials(self, project_id: str) -> Credentials:
        """Issue a new credential bundle for ``project_id``."""
        ...

    async def save_credentials(self, workspace_id: str, credentials: Credentials) -> None:
        """Bind ``credentials`` to ``workspace_id``, replacing any previous binding."""
        ...

    async def load_credentials(self, workspace_id: str) -> Credentials:
        """Return the bound credentials.  Raises ``CredentialsNotFoundError`` if missing."""
        ...

    async def destroy_credentials(self, credentials: Credentials, last_state: str | None, workspace_id: str) -> None:
        """Revoke ``credentials`` and drop the binding.  Safe to call twice."""
        ...
