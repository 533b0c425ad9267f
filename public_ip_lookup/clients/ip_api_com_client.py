from typing import Any

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, target_segment
from public_ip_lookup.errors import ReservedIpError, TooManyRequestsError, UpstreamServiceError
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider

# Numeric field mask selecting every field documented at https://ip-api.com/docs/api:json
FIELDS = 66846719


class IpApiCom(BaseIPLookupClient):
    """Client for the http://ip-api.com JSON API.

    The free endpoint is plain HTTP only and takes no API key.
    """

    provider = Provider.ip_api_com
    target_lookup = True

    def __init__(self, base_url: str = "http://ip-api.com") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        return f"{self._base_url}/json/{target_segment(target, '{ip}')}?fields={FIELDS}"

    def _handle_provider_error(self, data: dict[str, Any]) -> None:
        """Normalize ip-api.com status/message into domain exceptions."""
        status_value = str(data.get("status") or "success").lower()

        if status_value == "success":
            return

        # status is "fail" or unknown
        message = str(data.get("message") or "Unknown error from ip-api.com")
        lower_msg = message.lower()

        if "private range" in lower_msg or "reserved range" in lower_msg:
            raise ReservedIpError(message, provider=self.identity())

        if "quota" in lower_msg or "limit" in lower_msg:
            raise TooManyRequestsError(f"IP provider rate limit or quota exceeded: {message}", provider=self.identity())

        raise UpstreamServiceError(message, provider=self.identity())

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        """Map ip-api.com's response into our normalized schema."""
        return LookupResponse(
            ip=data.get("query"),
            continent=data.get("continent"),
            country=data.get("country"),
            country_code=data.get("countryCode"),
            region=data.get("regionName") or None,
            region_code=data.get("region") or None,
            city=data.get("city"),
            postal_code=data.get("zip") or None,
            latitude=data.get("lat"),
            longitude=data.get("lon"),
            time_zone=data.get("timezone"),
            asn=data.get("as") or None,
            asn_org=data.get("org") or data.get("isp"),
            hostname=data.get("reverse") or None,
            is_proxy=data.get("proxy"),
            provider=self.identity(),
        )
