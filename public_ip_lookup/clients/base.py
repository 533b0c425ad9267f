import json
from abc import ABC, abstractmethod
from ipaddress import IPv4Address, IPv6Address
from typing import Any, ClassVar

import httpx
from pydantic import ValidationError

from public_ip_lookup.errors import ParseError
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import LookupProvider, Parameters, Provider
from public_ip_lookup.transport import Transport

IPAddress = IPv4Address | IPv6Address


class BaseIPLookupClient(ABC):
    """Abstract base for all IP lookup providers.

    Concrete implementations build the provider URL, optionally attach
    credentials, and map the provider-specific JSON reply into the normalized
    `LookupResponse` shape. Issuing the request is the only side effect;
    `parse` is pure.
    """

    provider: ClassVar[Provider]
    target_lookup: ClassVar[bool] = False

    @abstractmethod
    def endpoint(self, parameters: Parameters | None, target: IPAddress | None) -> str:
        """Build the request URL from the optional API key and target address."""
        raise NotImplementedError

    def authenticate(self, request: httpx.Request, parameters: Parameters | None) -> httpx.Request:
        """Attach credentials that do not travel in the URL. No-op by default."""
        return request

    def build_request(self, parameters: Parameters | None, target: IPAddress | None) -> httpx.Request:
        request = httpx.Request(
            "GET",
            self.endpoint(parameters, target),
            headers={"Accept": "application/json"},
        )
        return self.authenticate(request, parameters)

    async def fetch(self, transport: Transport, request: httpx.Request) -> httpx.Response:
        return await transport.send(request)

    def parse(self, body: str) -> LookupResponse:
        """Decode the provider reply and normalize it."""
        data = self._parse_json(body)
        self._handle_provider_error(data)
        try:
            return self._normalize_payload(data)
        except (ValidationError, AttributeError, TypeError) as exc:
            # Valid JSON of the wrong shape is still a bad reply from this provider.
            raise ParseError(f"Unexpected reply from IP provider: {exc!r}", provider=self.identity()) from exc

    def identity(self) -> LookupProvider:
        return LookupProvider(name=self.provider)

    def supports_target_lookup(self) -> bool:
        return self.target_lookup

    def _handle_provider_error(self, data: dict[str, Any]) -> None:
        """Raise a domain error when the payload itself reports a failure."""

    @abstractmethod
    def _normalize_payload(self, data: dict[str, Any]) -> LookupResponse:
        raise NotImplementedError

    def _parse_json(self, body: str) -> dict[str, Any]:
        try:
            data = json.loads(body)
        except ValueError as exc:
            raise ParseError(
                f"Failed to decode IP provider response as JSON: {exc}", provider=self.identity()
            ) from exc
        if not isinstance(data, dict):
            raise ParseError("IP provider response is not a JSON object.", provider=self.identity())
        return data


def target_segment(target: IPAddress | None, template: str) -> str:
    """Render `template` with the target address, or an empty string without one."""
    if target is None:
        return ""
    return template.format(ip=target)


def section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Nested object `data[key]`, or an empty dict when it is missing or not an object."""
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def with_query(url: str, name: str, value: str | None) -> str:
    """Append `name=value` to `url` with proper escaping; unchanged when `value` is None."""
    if value is None:
        return url
    return str(httpx.URL(url).copy_add_param(name, value))
