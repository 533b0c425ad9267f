from typing import Any

import httpx

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import LookupProvider, Parameters, Provider
from public_ip_lookup.transport import Transport


class MockClient(BaseIPLookupClient):
    """Test provider that always resolves to a fixed address.

    Without an endpoint the reply is produced in-process and no request leaves
    the machine. With an endpoint the request goes through the transport like
    any other provider, so status handling can be exercised against a stub
    server; the reply body is ignored.
    """

    provider = Provider.mock
    target_lookup = True

    def __init__(self, ip: str, endpoint: str | None = None) -> None:
        self._ip = ip
        self._endpoint = endpoint

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return self._endpoint or "http://mock.invalid/json"

    async def fetch(self, transport: Transport, request: httpx.Request) -> httpx.Response:
        if self._endpoint is None:
            return httpx.Response(200, json={"ip": self._ip}, request=request)
        return await super().fetch(transport, request)

    def identity(self) -> LookupProvider:
        return LookupProvider.mock(self._ip, self._endpoint)

    def _parse_json(self, body: str) -> dict[str, Any]:
        return {}

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(ip=self._ip, provider=self.identity())
