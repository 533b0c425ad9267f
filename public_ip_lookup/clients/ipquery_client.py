from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, section, target_segment
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpQuery(BaseIPLookupClient):
    """Client for https://ipquery.io."""

    provider = Provider.ipquery
    target_lookup = True

    def __init__(self, base_url: str = "https://api.ipquery.io") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/{target_segment(target, '{ip}')}?format=json"

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        isp = section(data, "isp")
        location = section(data, "location")
        risk = data.get("risk")

        is_proxy = None
        if isinstance(risk, dict):
            is_proxy = any(bool(risk.get(flag)) for flag in ("is_proxy", "is_vpn", "is_tor"))

        return LookupResponse(
            ip=data.get("ip"),
            country=location.get("country"),
            country_code=location.get("country_code"),
            region=location.get("state"),
            city=location.get("city"),
            postal_code=location.get("zipcode"),
            latitude=location.get("latitude"),
            longitude=location.get("longitude"),
            time_zone=location.get("timezone"),
            asn=isp.get("asn"),
            asn_org=isp.get("org"),
            is_proxy=is_proxy,
            provider=self.identity(),
        )
