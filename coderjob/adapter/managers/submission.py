"""Workspace submission.

Issues application credentials, creates the workspace with them as rich
parameters, then binds the credentials to the new workspace id.
"""

from __future__ import annotations

import secrets
import string
from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger

from coderjob.adapter.gateway import TransportError

if TYPE_CHECKING:
    from coderjob.adapter.credentials.base import CredentialProvider
    from coderjob.adapter.gateway import CoderClient
    from coderjob.adapter.models.job import Credentials, SubmitRequest

_BASE36 = string.digits + string.ascii_lowercase
SUFFIX_SPACE = 36**8


def to_base36(value: int) -> str:
    if value < 0:
        msg = f"Cannot encode negative value {value}"
        raise ValueError(msg)
    digits = []
    while True:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
        if value == 0:
            return "".join(reversed(digits))


def random_suffix() -> str:
    """Random base36 suffix keeping workspace names unique."""
    return to_base36(secrets.randbelow(SUFFIX_SPACE))


def workspace_name(username: str, requested: str, suffix: str) -> str:
    return f"{username}-{requested}-{suffix}"


def rich_parameters(request: SubmitRequest, credentials: Credentials) -> list[dict[str, str]]:
    """Credential and project parameters first, then every caller parameter as text."""
    values = [
        {"name": "application_credential_name", "value": credentials.name},
        {"name": "application_credential_id", "value": credentials.id},
        {"name": "application_credential_secret", "value": credentials.secret.get_secret_value()},
        {"name": "project_id", "value": request.project_id},
    ]
    values.extend({"name": name, "value": str(value)} for name, value in request.parameters.items())
    return values


async def submit_workspace(
    client: CoderClient,
    credentials: CredentialProvider,
    request: SubmitRequest,
    *,
    username: str,
    service_user: str = "me",
    suffix_factory: Callable[[], str] = random_suffix,
) -> str:
    """Create a workspace for ``request`` and return its id.

    Credential generation failures abort before anything is created.  If the
    create call fails the generated credentials are left as they are.
    """
    app_credentials = await credentials.generate_credentials(request.project_id)

    body = {
        "template_version_id": request.template_version_id,
        "name": workspace_name(username, request.workspace_name, suffix_factory()),
        "rich_parameter_values": rich_parameters(request, app_credentials),
    }

    try:
        resp = await client.create_workspace(request.org_id, service_user, body)
    except TransportError:
        logger.warning(
            "Workspace {} not created; credentials {} were not bound", body["name"], app_credentials.id
        )
        raise

    workspace_id = resp["id"]
    await credentials.save_credentials(workspace_id, app_credentials)

    logger.info("Workspace submitted: {} (name={}, org={})", workspace_id, body["name"], request.org_id)
    return workspace_id
