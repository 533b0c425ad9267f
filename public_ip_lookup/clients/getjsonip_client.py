from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class GetJsonIp(BaseIPLookupClient):
    """Client for https://getjsonip.com (IPv4 endpoint). Reports the bare address."""

    provider = Provider.getjsonip

    def __init__(self, base_url: str = "https://ipv4.jsonip.com") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return self._base_url

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(ip=data.get("ip"), provider=self.identity())
