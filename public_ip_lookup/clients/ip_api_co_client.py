from typing import Any

import httpx

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress, target_segment, with_query
from public_ip_lookup.errors import ReservedIpError, TooManyRequestsError, UpstreamServiceError
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import Parameters, Provider


class IpApiCo(BaseIPLookupClient):
    """Client for the https://ipapi.co/ IP geolocation API."""

    provider = Provider.ipapi_co
    target_lookup = True

    def __init__(self, base_url: str = "https://ipapi.co") -> None:
        self._base_url = base_url.rstrip("/")

    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        url = f"{self._base_url}/{target_segment(target, '{ip}/')}json/"
        return with_query(url, "key", parameters.api_key if parameters else None)

    def authenticate(self, request: httpx.Request, parameters: Parameters | None) -> httpx.Request:
        # ipapi.co throttles requests carrying common library user agents.
        request.headers["User-Agent"] = "nil"
        return request

    def _handle_provider_error(self, data: dict[str, Any]) -> None:
        """Normalize provider-specific error payloads into domain exceptions.

        ipapi.co embeds error information in the JSON body, sometimes with HTTP 200.
        Examples:
            { "error": true, "reason": "Invalid IP Address", "ip": "..." }
            { "error": true, "reason": "Reserved IP Address", "ip": "127.0.0.1", "reserved": true }
            { "error": true, "reason": "RateLimited", "message": "..." }
            { "error": true, "reason": "Quota exceeded", "message": "..." }
        """
        if not data.get("error"):
            return

        reason = str(data.get("reason") or data.get("message") or "Unknown error from ipapi.co")
        lower_reason = reason.lower()

        # Reserved / private address, e.g. 127.0.0.1, 192.168.x.x.
        if "reserved" in lower_reason or data.get("reserved") is True:
            raise ReservedIpError(reason, provider=self.identity())

        # Rate limiting / quota exceeded signalled via reason or 200 with error.
        if "ratelimited" in lower_reason or "quota" in lower_reason:
            raise TooManyRequestsError(f"IP provider rate limit or quota exceeded: {reason}", provider=self.identity())

        raise UpstreamServiceError(reason, provider=self.identity())

    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        """Map ipapi.co's response into our normalized schema."""
        return LookupResponse(
            ip=data.get("ip"),
            country=data.get("country_name"),
            country_code=data.get("country_code") or data.get("country"),
            region=data.get("region"),
            region_code=data.get("region_code"),
            city=data.get("city"),
            postal_code=data.get("postal"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            time_zone=data.get("timezone"),
            asn=data.get("asn"),
            # ipapi.co exposes organisation/ISP information via the "org" field.
            asn_org=data.get("org"),
            hostname=data.get("hostname"),
            provider=self.identity(),
        )
