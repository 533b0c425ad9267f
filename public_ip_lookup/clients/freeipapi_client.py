from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class FreeIpApi(BaseIPLookupClient):
    """Client for https://freeipapi.com. Resolves the caller's address only."""

    provider = Provider.freeipapi

    def __init__(self, base_url: str = "https://freeipapi.com") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/api/json"

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(
            ip=data.get("ipAddress"),
            continent=data.get("continent"),
            country=data.get("countryName"),
            country_code=data.get("countryCode"),
            region=data.get("regionName"),
            city=data.get("cityName"),
            postal_code=data.get("zipCode"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            time_zone=data.get("timeZone"),
            is_proxy=data.get("isProxy"),
            provider=self.identity(),
        )
