from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class Ipify(BaseIPLookupClient):
    """Client for https://www.ipify.org. Reports the bare address, no geolocation."""

    provider = Provider.ipify

    def __init__(self, base_url: str = "https://api64.ipify.org") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/?format=json"

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(ip=data.get("ip"), provider=self.identity())
