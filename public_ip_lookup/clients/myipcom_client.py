from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class MyIpCom(BaseIPLookupClient):
    """Client for https://myip.com. Resolves the caller's address and country only."""

    provider = Provider.myip_com

    def __init__(self, base_url: str = "https://api.myip.com") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return self._base_url

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(
            ip=data.get("ip"),
            country=data.get("country"),
            country_code=data.get("cc"),
            provider=self.identity(),
        )
