from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, section
from public_ip_lookup.errors import UpstreamServiceError
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class MyIp(BaseIPLookupClient):
    """Client for https://my-ip.io. Resolves the caller's address only."""

    provider = Provider.myip

    def __init__(self, base_url: str = "https://api.my-ip.io") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/v2/ip.json"

    def _handle_provider_error(self, data: dict[str, Any]) -> None:
        if data.get("success") is False:
            raise UpstreamServiceError("my-ip.io reported an unsuccessful lookup", provider=self.identity())

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        country = section(data, "country")
        location = section(data, "location")
        asn = section(data, "asn")
        return LookupResponse(
            ip=data.get("ip"),
            country=country.get("name"),
            country_code=country.get("code"),
            region=data.get("region"),
            city=data.get("city"),
            latitude=location.get("lat"),
            longitude=location.get("lon"),
            time_zone=data.get("timeZone"),
            asn=asn.get("number"),
            asn_org=asn.get("name"),
            provider=self.identity(),
        )
