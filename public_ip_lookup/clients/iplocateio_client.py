from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, section, target_segment, with_query
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpLocateIo(BaseIPLookupClient):
    """Client for https://iplocate.io. An optional key is passed as `?apikey=`."""

    provider = Provider.iplocate_io
    target_lookup = True

    def __init__(self, base_url: str = "https://www.iplocate.io") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        url = f"{self._base_url}/api/lookup/{target_segment(target, '{ip}')}"
        return with_query(url, "apikey", parameters.api_key if parameters else None)

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        return LookupResponse(
            ip=data.get("ip"),
            continent=data.get("continent"),
            country=data.get("country"),
            country_code=data.get("country_code"),
            region=data.get("subdivision"),
            city=data.get("city"),
            postal_code=data.get("postal_code"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            time_zone=data.get("time_zone"),
            asn=data.get("asn"),
            asn_org=data.get("org"),
            is_proxy=section(data, "threat").get("is_proxy"),
            provider=self.identity(),
        )
