"""Shared fixtures for identity provider tests."""

import json

import httpx
import pytest

from percolate_identity.models import Token


@pytest.fixture
def token():
    """Token as returned by a successful code exchange."""
    return Token(access_token="access-123", refresh_token="refresh-456")


@pytest.fixture
def requests_seen():
    """Requests captured by mock transports."""
    return []


@pytest.fixture
def respond_with(requests_seen):
    """Factory for a transport that answers every request the same way.

    Example:
        transport = respond_with({"id": "1"})
        transport = respond_with(content=b"not json")
        transport = respond_with({"error": "invalid_grant"}, status_code=400)
    """

    def build(payload=None, status_code=200, content=None):
        def handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, content=json.dumps(payload).encode())

        return httpx.MockTransport(handler)

    return build


@pytest.fixture
def route(requests_seen):
    """Factory for a transport that answers by URL.

    Unknown URLs get a 404.
    """

    def build(responses: dict[str, httpx.Response]):
        def handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return responses.get(str(request.url), httpx.Response(404))

        return httpx.MockTransport(handler)

    return build


@pytest.fixture
def failing_transport():
    """Transport that fails every request with a connection error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)
