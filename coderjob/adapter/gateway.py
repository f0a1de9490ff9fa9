"""Remote call gateway for the Coder ``/api/v2`` REST API.

Thin wrapper around ``httpx.AsyncClient``: every call sends the session
token, parses the JSON body and raises ``TransportError`` on any non-2xx
response.  Endpoint helpers cover exactly the calls the orchestrators make.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger

if TYPE_CHECKING:
    from coderjob.adapter.settings import CoderJobSettings

_METHODS = frozenset({"GET", "POST", "DELETE"})


_REDACTED = "**********"


def redact(body: Any) -> Any:
    """Copy of a request body with secret values masked.

    Masks values of keys containing ``secret`` or ``token`` and the ``value``
    of ``{"name": ..., "value": ...}`` pairs whose name does.
    """
    if isinstance(body, list):
        return [redact(item) for item in body]
    if not isinstance(body, dict):
        return body
    name = body.get("name")
    secret_pair = isinstance(name, str) and _is_secret(name)
    return {
        key: _REDACTED if _is_secret(key) or (secret_pair and key == "value") else redact(value)
        for key, value in body.items()
    }


def _is_secret(key: str) -> bool:
    key = key.lower()
    return "secret" in key or "token" in key


class TransportError(RuntimeError):
    """Raised when the Coder API answers with a non-2xx status.

    ``body`` is the request body as sent; the message only ever shows it
    redacted.  ``response_body`` is the raw response text.
    """

    def __init__(
        self,
        status_code: int,
        reason: str,
        endpoint: str,
        body: Any = None,
        response_body: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.endpoint = endpoint
        self.body = body
        self.response_body = response_body
        msg = f"HTTP Error: {status_code} {reason} for request {endpoint} and body {redact(body)}"
        if response_body:
            msg = f"{msg}: {response_body}"
        super().__init__(msg)


class InvalidMethodError(ValueError):
    """Raised when an unsupported HTTP verb is requested."""


class CoderClient:
    """Async client for the subset of the Coder API used by the adapter.

    Use as an async context manager, or call ``aclose()`` when done.  Pass a
    custom ``transport`` (e.g. ``httpx.MockTransport``) to stub the server.
    """

    def __init__(
        self,
        host: str,
        token: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=host.rstrip("/"),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Coder-Session-Token": token,
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: CoderJobSettings, transport: httpx.AsyncBaseTransport | None = None
    ) -> CoderClient:
        return cls(
            settings.host,
            settings.token.get_secret_value(),
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> CoderClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- Generic call ----------------------------------------------------------

    async def call(
        self,
        method: str,
        path: str,
        body: dict | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute ``method`` against ``path`` and return the parsed JSON body.

        Returns ``None`` for an empty response body.
        """
        verb = method.upper()
        if verb not in _METHODS:
            msg = f"Invalid HTTP method: {method}"
            raise InvalidMethodError(msg)

        logger.debug("Coder API {} {}", verb, path)
        response = await self._client.request(verb, path, json=body, params=params)

        if not response.is_success:
            raise TransportError(
                response.status_code, response.reason_phrase, str(response.url), body, response_body=response.text
            )
        if not response.content:
            return None
        return response.json()

    # -- Endpoints -------------------------------------------------------------

    async def create_workspace(self, org_id: str, member: str, body: dict) -> dict:
        return await self.call("POST", f"/api/v2/organizations/{org_id}/members/{member}/workspaces", body)

    async def create_delete_build(self, workspace_id: str) -> dict:
        body = {"orphan": False, "transition": "delete"}
        return await self.call("POST", f"/api/v2/workspaces/{workspace_id}/builds", body)

    async def get_workspace(self, workspace_id: str) -> dict | None:
        return await self.call("GET", f"/api/v2/workspaces/{workspace_id}", params={"include_deleted": "true"})

    async def get_build_logs(self, build_id: str) -> list[dict]:
        return await self.call("GET", f"/api/v2/workspacebuilds/{build_id}/logs") or []

    async def list_workspaces(self, query: str | None = None) -> list[dict]:
        params = {"q": query} if query else None
        resp = await self.call("GET", "/api/v2/workspaces", params=params)
        return (resp or {}).get("workspaces") or []
