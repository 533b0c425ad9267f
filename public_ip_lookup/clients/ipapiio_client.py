from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, section
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpApiIo(BaseIPLookupClient):
    """Client for https://ip-api.io. Resolves the caller's address only."""

    provider = Provider.ip_api_io

    def __init__(self, base_url: str = "https://ip-api.io") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/json/"

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(
            ip=data.get("ip"),
            continent="Europe" if data.get("is_in_european_union") else None,
            country=data.get("country_name"),
            country_code=data.get("country_code"),
            # Unknown values come back as empty strings.
            region=data.get("region_name") or None,
            region_code=data.get("region_code") or None,
            city=data.get("city") or None,
            postal_code=data.get("zip_code") or None,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            time_zone=data.get("time_zone"),
            asn_org=data.get("organisation"),
            is_proxy=section(data, "suspiciousFactors").get("isProxy"),
            provider=self.identity(),
        )
