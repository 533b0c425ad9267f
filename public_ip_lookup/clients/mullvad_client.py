from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class Mullvad(BaseIPLookupClient):
    """Client for Mullvad's https://am.i.mullvad.net connection check.

    `is_proxy` reports whether the caller exits through a Mullvad VPN server.
    """

    provider = Provider.mullvad

    def __init__(self, base_url: str = "https://am.i.mullvad.net") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/json"

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(
            ip=data.get("ip"),
            country=data.get("country"),
            city=data.get("city"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            asn_org=data.get("organization"),
            is_proxy=data.get("mullvad_exit_ip"),
            provider=self.identity(),
        )
