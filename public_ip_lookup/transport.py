"""HTTP transports used by the lookup service.

Lookups are written once as coroutines against `Transport.send`. The async
transport suspends on `httpx.AsyncClient`, the blocking one issues the request
on `httpx.Client` and never yields, so the same call graph can be driven to
completion by `asyncio.run` from synchronous code.
"""

from abc import ABC, abstractmethod

import httpx

DEFAULT_TIMEOUT_SECONDS = 5.0


class Transport(ABC):
    """Issues a single prepared request and returns the provider's reply."""

    def __init__(self, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._timeout_seconds = timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    @abstractmethod
    async def send(self, request: httpx.Request) -> httpx.Response:
        """Send `request`; transport failures surface as `httpx.RequestError`."""
        raise NotImplementedError


class AsyncTransport(Transport):
    """Non-blocking transport backed by `httpx.AsyncClient`."""

    async def send(self, request: httpx.Request) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            return await client.send(request)


class BlockingTransport(Transport):
    """Thread-blocking transport backed by `httpx.Client`."""

    async def send(self, request: httpx.Request) -> httpx.Response:
        with httpx.Client(timeout=self._timeout_seconds) as client:
            return client.send(request)
