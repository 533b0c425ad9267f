from collections.abc import Iterable, Sequence
from http import HTTPStatus
from ipaddress import ip_address

import httpx

from public_ip_lookup.clients.base import BaseIPLookupClient, IPAddress
from public_ip_lookup.config import get_settings
from public_ip_lookup.errors import (
    AllProvidersFailedError,
    InvalidIpError,
    IpProviderError,
    NoProvidersError,
    RequestStatusError,
    TargetNotSupportedError,
    TooManyRequestsError,
    TransportError,
)
from public_ip_lookup.factory import IpLookupProviderFactory, ProviderEntry
from public_ip_lookup.logger import logger
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import LookupProvider, Parameters
from public_ip_lookup.transport import AsyncTransport, Transport

Target = str | IPAddress | None


def normalize_target(target: Target) -> IPAddress | None:
    """Parse a target address given as text or as an `ipaddress` object."""
    if target is None or isinstance(target, IPAddress):
        return target
    try:
        return ip_address(str(target).strip())
    except ValueError as exc:
        raise InvalidIpError(f"{target!r} is not a valid IPv4 or IPv6 address") from exc


def default_transport() -> Transport:
    return AsyncTransport(timeout_seconds=get_settings().request_timeout)


def handle_response(response: httpx.Response, provider: LookupProvider | None = None) -> str:
    """Map the provider's HTTP status to the reply body or a domain error."""
    status_code = response.status_code

    if status_code == HTTPStatus.OK:
        return response.text

    if status_code == HTTPStatus.TOO_MANY_REQUESTS:
        raise TooManyRequestsError("IP provider rate limit or quota exceeded (HTTP 429).", provider=provider)

    raise RequestStatusError(f"IP provider returned HTTP {status_code}", status_code=status_code, provider=provider)


class LookupService:
    """Runs request/parse cycles against one provider.

    Every `lookup` issues exactly one request; failures are raised, never retried.
    """

    def __init__(
        self,
        provider: LookupProvider,
        parameters: Parameters | None = None,
        transport: Transport | None = None,
        factory: IpLookupProviderFactory | None = None,
    ) -> None:
        self._factory = factory or IpLookupProviderFactory()
        self._client: BaseIPLookupClient = self._factory(provider)
        self._parameters = parameters
        self._transport = transport or default_transport()

    @property
    def provider_type(self) -> LookupProvider:
        return self._client.identity()

    def set_provider(self, provider: LookupProvider, parameters: Parameters | None = None) -> "LookupService":
        """Swap the provider (and its credentials) used for subsequent lookups."""
        self._client = self._factory(provider)
        self._parameters = parameters
        return self

    async def lookup(self, target: Target = None) -> LookupResponse:
        """Look up `target`, or the caller's own public address when it is None."""
        target_ip = normalize_target(target)
        provider = self.provider_type

        if target_ip is not None and not self._client.supports_target_lookup():
            raise TargetNotSupportedError(
                f"Provider {provider} cannot look up arbitrary target addresses", provider=provider
            )

        request = self._client.build_request(self._parameters, target_ip)
        # Query strings may carry API keys, keep them out of the logs.
        logger.debug(
            f"Sending lookup request provider={provider} target={target_ip} "
            f"host={request.url.host} path={request.url.path}"
        )

        try:
            response = await self._client.fetch(self._transport, request)
        except httpx.RequestError as exc:
            raise TransportError(f"Request to IP provider failed: {repr(exc)}", provider=provider) from exc

        body = handle_response(response, provider)
        return self._client.parse(body)

    async def lookup_bulk(self, targets: Iterable[Target]) -> list[LookupResponse]:
        """Look up several targets one after another; the first failure is raised."""
        return [await self.lookup(target) for target in targets]


async def lookup_with_fallback(
    providers: Sequence[ProviderEntry],
    target: Target = None,
    transport: Transport | None = None,
    factory: IpLookupProviderFactory | None = None,
) -> LookupResponse:
    """Try `providers` strictly in order and return the first successful response.

    Providers after the first success are never contacted. When all of them fail,
    `AllProvidersFailedError` carries every failure in the order they happened.
    """
    if not providers:
        raise NoProvidersError("No lookup providers given")

    target_ip = normalize_target(target)
    transport = transport or default_transport()
    factory = factory or IpLookupProviderFactory()
    errors: list[IpProviderError | TargetNotSupportedError] = []

    for provider, parameters in providers:
        service = LookupService(provider, parameters, transport=transport, factory=factory)
        try:
            response = await service.lookup(target_ip)
        except (IpProviderError, TargetNotSupportedError) as exc:
            logger.warning(f"Lookup provider failed, trying next provider={provider} target={target_ip} error={exc}")
            errors.append(exc)
            continue

        logger.info(f"Lookup succeeded provider={provider} target={target_ip} ip={response.ip}")
        return response

    logger.error(f"All lookup providers failed count={len(errors)} target={target_ip}")
    raise AllProvidersFailedError(errors)
