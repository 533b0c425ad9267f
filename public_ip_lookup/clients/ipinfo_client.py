from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, target_segment, with_query
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpInfo(BaseIPLookupClient):
    """Client for the https://ipinfo.io JSON API.

    Works without a token at a reduced rate; a token is passed as `?token=`.
    """

    provider = Provider.ipinfo
    target_lookup = True

    def __init__(self, base_url: str = "https://ipinfo.io") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        url = f"{self._base_url}/{target_segment(target, '{ip}/')}json"
        return with_query(url, "token", parameters.api_key if parameters else None)

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        latitude, longitude = _split_location(data.get("loc"))
        asn, asn_org = _split_org(data.get("org"))
        return LookupResponse(
            ip=data.get("ip"),
            # ipinfo only reports the ISO country code.
            country=data.get("country"),
            country_code=data.get("country"),
            region=data.get("region"),
            city=data.get("city"),
            postal_code=data.get("postal"),
            latitude=latitude,
            longitude=longitude,
            time_zone=data.get("timezone"),
            asn=asn,
            asn_org=asn_org,
            hostname=data.get("hostname"),
            provider=self.identity(),
        )


def _split_location(loc: Any) -> tuple[str | None, str | None]:
    """Split ipinfo's `"lat,lon"` string."""
    if not isinstance(loc, str):
        return None, None
    coords = loc.split(",")
    if len(coords) != 2:
        return None, None
    return coords[0].strip(), coords[1].strip()


def _split_org(org: Any) -> tuple[str | None, str | None]:
    """Split `"AS15169 Google LLC"` into the AS number and the organisation name."""
    if not isinstance(org, str) or not org:
        return None, None
    number, _, name = org.partition(" ")
    if number.upper().startswith("AS"):
        return number, name or None
    return None, org
