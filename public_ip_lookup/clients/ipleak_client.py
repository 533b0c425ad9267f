from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpLeak(BaseIPLookupClient):
    """Client for https://ipleak.net. Resolves the caller's address only."""

    provider = Provider.ipleak

    def __init__(self, base_url: str = "https://ipleak.net") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/json/"

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(
            ip=data.get("ip"),
            continent=data.get("continent_name"),
            country=data.get("country_name"),
            country_code=data.get("country_code"),
            region=data.get("region_name"),
            region_code=data.get("region_code"),
            city=data.get("city_name"),
            postal_code=data.get("postal_code"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            time_zone=data.get("time_zone"),
            asn=data.get("as_number"),
            asn_org=data.get("isp_name"),
            hostname=data.get("reverse") or None,
            provider=self.identity(),
        )
