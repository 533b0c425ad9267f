from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, target_segment
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IfConfig(BaseIPLookupClient):
    """Client for https://ifconfig.co (echoip)."""

    provider = Provider.ifconfig
    target_lookup = True

    def __init__(self, base_url: str = "https://ifconfig.co") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/json{target_segment(target, '?ip={ip}')}"

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(
            ip=data.get("ip"),
            continent="Europe" if data.get("country_eu") else None,
            country=data.get("country"),
            country_code=data.get("country_iso"),
            region=data.get("region_name"),
            region_code=data.get("region_code"),
            city=data.get("city"),
            postal_code=data.get("zip_code"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            time_zone=data.get("time_zone"),
            asn=data.get("asn"),
            asn_org=data.get("asn_org"),
            hostname=data.get("hostname"),
            provider=self.identity(),
        )
