import json
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

import httpx

from public_ip_lookup.transport import Transport

# A fixed reply, an exception to raise, or a mapping from request host to either.
Outcome = Any


class MockResponse:
    def __init__(self, status_code: int, payload: dict[str, Any] | None = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text or json.dumps(self._payload)

    def json(self) -> dict[str, Any]:
        return self._payload


def _resolve(outcome: Outcome, request: httpx.Request) -> MockResponse:
    if isinstance(outcome, dict):
        outcome = outcome[request.url.host]
    if isinstance(outcome, Exception):
        raise outcome
    return outcome


class MockAsyncClient:
    """Minimal async context-manager mock for httpx.AsyncClient.

    Every request passed to `send` is appended to `sent`.
    """

    def __init__(self, outcome: Outcome, sent: list[httpx.Request]) -> None:
        self._outcome = outcome
        self.sent = sent

    async def __aenter__(self) -> "MockAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def send(self, request: httpx.Request) -> MockResponse:
        self.sent.append(request)
        return _resolve(self._outcome, request)


class MockClient:
    """Minimal context-manager mock for the blocking httpx.Client."""

    def __init__(self, outcome: Outcome, sent: list[httpx.Request]) -> None:
        self._outcome = outcome
        self.sent = sent

    def __enter__(self) -> "MockClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def send(self, request: httpx.Request) -> MockResponse:
        self.sent.append(request)
        return _resolve(self._outcome, request)


class FailingAsyncClient:
    """Async client that raises a RequestError on enter to simulate network failure."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        pass

    async def __aenter__(self) -> "FailingAsyncClient":
        raise httpx.ConnectError("Network failure")

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def send(self, request: httpx.Request) -> MockResponse:
        return MockResponse(status_code=HTTPStatus.OK)


class ForbiddenAsyncClient:
    """Async client that fails the test as soon as anything tries to open it."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise AssertionError("no network call was expected")


class FakeTransport(Transport):
    """Transport double recording requests and answering with a fixed outcome."""

    def __init__(self, outcome: Outcome) -> None:
        super().__init__()
        self._outcome = outcome
        self.sent: list[httpx.Request] = []

    async def send(self, request: httpx.Request) -> MockResponse:
        self.sent.append(request)
        return _resolve(self._outcome, request)


def make_fake_async_client(outcome: Outcome, sent: list[httpx.Request] | None = None) -> Callable[..., MockAsyncClient]:
    """Factory for a fake httpx.AsyncClient returning a fixed outcome.

    This avoids repeating the same stub definition in every test.
    """
    sent = sent if sent is not None else []

    def _fake_client(*args: Any, **kwargs: Any) -> MockAsyncClient:
        return MockAsyncClient(outcome, sent)

    return _fake_client


def make_fake_client(outcome: Outcome, sent: list[httpx.Request] | None = None) -> Callable[..., MockClient]:
    """Factory for a fake blocking httpx.Client returning a fixed outcome."""
    sent = sent if sent is not None else []

    def _fake_client(*args: Any, **kwargs: Any) -> MockClient:
        return MockClient(outcome, sent)

    return _fake_client
