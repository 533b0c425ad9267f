from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, section, target_segment
from public_ip_lookup.errors import ReservedIpError, TooManyRequestsError, UpstreamServiceError
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpWhoIs(BaseIPLookupClient):
    """Client for https://ipwho.is (ipwhois.io free endpoint)."""

    provider = Provider.ipwhois
    target_lookup = True

    def __init__(self, base_url: str = "https://ipwho.is") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/{target_segment(target, '{ip}')}"

    def _handle_provider_error(self, data: dict[str, Any]) -> None:
        """ipwho.is answers HTTP 200 with `"success": false` on failures."""
        if data.get("success", True):
            return

        message = str(data.get("message") or "Unknown error from ipwho.is")
        lower_msg = message.lower()

        if "reserved" in lower_msg:
            raise ReservedIpError(message, provider=self.identity())
        if "limit" in lower_msg:
            raise TooManyRequestsError(f"IP provider rate limit or quota exceeded: {message}", provider=self.identity())
        raise UpstreamServiceError(message, provider=self.identity())

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        connection = section(data, "connection")
        timezone = section(data, "timezone")
        return LookupResponse(
            ip=data.get("ip"),
            continent=data.get("continent"),
            country=data.get("country"),
            country_code=data.get("country_code"),
            region=data.get("region"),
            region_code=data.get("region_code"),
            city=data.get("city"),
            postal_code=data.get("postal") or None,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            time_zone=timezone.get("id"),
            asn=connection.get("asn"),
            asn_org=connection.get("org"),
            provider=self.identity(),
        )
