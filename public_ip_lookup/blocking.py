"""Synchronous API.

Runs the same lookup code as the async API on a `BlockingTransport`, so the
request is issued with `httpx.Client` and the calling thread blocks until the
provider answers. Must not be called from inside a running event loop.
"""

import asyncio
from collections.abc import Iterable, Sequence

from public_ip_lookup import lookup, service
from public_ip_lookup.cache import CacheStorage
from public_ip_lookup.config import get_settings
from public_ip_lookup.factory import ProviderEntry
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import LookupProvider, Parameters
from public_ip_lookup.service import Target
from public_ip_lookup.transport import BlockingTransport


def _transport() -> BlockingTransport:
    return BlockingTransport(timeout_seconds=get_settings().request_timeout)


class LookupService:
    """Blocking counterpart of `public_ip_lookup.service.LookupService`."""

    def __init__(self, provider: LookupProvider, parameters: Parameters | None = None) -> None:
        self._service = service.LookupService(provider, parameters, transport=_transport())

    @property
    def provider_type(self) -> LookupProvider:
        return self._service.provider_type

    def set_provider(self, provider: LookupProvider, parameters: Parameters | None = None) -> "LookupService":
        self._service.set_provider(provider, parameters)
        return self

    def lookup(self, target: Target = None) -> LookupResponse:
        return asyncio.run(self._service.lookup(target))

    def lookup_bulk(self, targets: Iterable[Target]) -> list[LookupResponse]:
        return asyncio.run(self._service.lookup_bulk(targets))


def lookup_with_fallback(providers: Sequence[ProviderEntry], target: Target = None) -> LookupResponse:
    return asyncio.run(service.lookup_with_fallback(providers, target, transport=_transport()))


def perform_lookup(providers: Sequence[ProviderEntry] | None = None, target: Target = None) -> LookupResponse:
    return asyncio.run(lookup.perform_lookup(providers, target, transport=_transport()))


def perform_cached_lookup(
    providers: Sequence[ProviderEntry] | None = None,
    target: Target = None,
    ttl: int | None = None,
    flush: bool = False,
    storage: CacheStorage | None = None,
) -> LookupResponse:
    return asyncio.run(
        lookup.perform_cached_lookup(providers, target, ttl, flush, storage=storage, transport=_transport())
    )
