from typing import Any

import httpx

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, section, target_segment
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpBase(BaseIPLookupClient):
    """Client for the https://ipbase.com v2 `info` API.

    The API key travels in the `apikey` header rather than in the URL.
    """

    provider = Provider.ipbase
    target_lookup = True

    def __init__(self, base_url: str = "https://api.ipbase.com") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/v2/info{target_segment(target, '?ip={ip}')}"

    def authenticate(self, request: httpx.Request, parameters: Parameters | None) -> httpx.Request:
        if parameters:
            request.headers["apikey"] = parameters.api_key
        return request

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        body = section(data, "data")
        connection = section(body, "connection")
        location = section(body, "location")
        country = section(location, "country")
        region = section(location, "region")
        security = body.get("security")

        is_proxy = None
        if isinstance(security, dict):
            is_proxy = any(bool(security.get(flag)) for flag in ("is_proxy", "is_vpn", "is_tor"))

        return LookupResponse(
            ip=body.get("ip"),
            continent=section(location, "continent").get("name"),
            country=country.get("name"),
            country_code=country.get("alpha2"),
            region=region.get("name"),
            region_code=region.get("alpha2"),
            city=section(location, "city").get("name"),
            postal_code=location.get("zip"),
            latitude=location.get("latitude"),
            longitude=location.get("longitude"),
            time_zone=section(body, "timezone").get("id"),
            asn=connection.get("asn"),
            asn_org=connection.get("organization"),
            hostname=body.get("hostname"),
            is_proxy=is_proxy,
            provider=self.identity(),
        )
