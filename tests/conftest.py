"""Shared test fixtures: an in-memory Coder API and credential provider.

The Coder API is stubbed with ``httpx.MockTransport`` so the real
``CoderClient`` runs end to end without network access.  Routes are keyed by
``(method, path)``; each route holds a queue of responses and repeats the
last one once the queue is drained.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from coderjob.adapter.credentials.base import CredentialsNotFoundError
from coderjob.adapter.gateway import CoderClient
from coderjob.adapter.models.job import Credentials

CODER_HOST = "https://coder.test"


class FakeCoder:
    """Scriptable Coder API backing an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Any]] = {}

    def add(self, method: str, path: str, *responses: Any) -> None:
        """Queue responses for a route.  Plain values are sent as 200 JSON; exceptions are raised."""
        self._routes.setdefault((method, path), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "Resource not found"})
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeCredentialProvider:
    """In-memory CredentialProvider recording every call."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.bound: dict[str, Credentials] = {}
        self.issued = Credentials(name="app-cred", id="cred-1", secret="s3cret")

    async def generate_credentials(self, project_id: str) -> Credentials:
        self.calls.append(("generate", project_id))
        return self.issued

    async def save_credentials(self, workspace_id: str, credentials: Credentials) -> None:
        self.calls.append(("save", workspace_id, credentials.id))
        self.bound[workspace_id] = credentials

    async def load_credentials(self, workspace_id: str) -> Credentials:
        self.calls.append(("load", workspace_id))
        if workspace_id not in self.bound:
            raise CredentialsNotFoundError(workspace_id)
        return self.bound[workspace_id]

    async def destroy_credentials(self, credentials: Credentials, last_state: str | None, workspace_id: str) -> None:
        self.calls.append(("destroy", credentials.id, last_state, workspace_id))
        self.bound.pop(workspace_id, None)

    def calls_named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def coder() -> FakeCoder:
    return FakeCoder()


@pytest.fixture
async def client(coder: FakeCoder) -> AsyncIterator[CoderClient]:
    async with CoderClient(CODER_HOST, "test-token", transport=coder.transport()) as c:
        yield c


@pytest.fixture
def credentials() -> FakeCredentialProvider:
    return FakeCredentialProvider()
