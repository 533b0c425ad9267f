from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, section, target_segment, with_query
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpData(BaseIPLookupClient):
    """Client for https://ipdata.co. Requires an API key (`?api-key=`)."""

    provider = Provider.ipdata
    target_lookup = True

    def __init__(self, base_url: str = "https://api.ipdata.co") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        url = f"{self._base_url}/{target_segment(target, '{ip}')}"
        return with_query(url, "api-key", parameters.api_key if parameters else None)

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        asn = section(data, "asn")
        threat = section(data, "threat")
        return LookupResponse(
            ip=data.get("ip"),
            continent=data.get("continent_name"),
            country=data.get("country_name"),
            country_code=data.get("country_code"),
            region=data.get("region"),
            region_code=data.get("region_code"),
            city=data.get("city"),
            postal_code=data.get("postal"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            time_zone=section(data, "time_zone").get("name"),
            asn=asn.get("asn"),
            asn_org=asn.get("name"),
            is_proxy=threat.get("is_proxy"),
            provider=self.identity(),
        )
