from collections.abc import Sequence

from public_ip_lookup.cache import CacheStorage, load_or_empty
from public_ip_lookup.config import get_settings
from public_ip_lookup.factory import IpLookupProviderFactory, ProviderEntry
from public_ip_lookup.logger import logger
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.service import Target, lookup_with_fallback, normalize_target
from public_ip_lookup.transport import Transport


def default_providers() -> list[ProviderEntry]:
    """Provider chain configured through PUBLIC_IP_PROVIDERS."""
    return IpLookupProviderFactory.parse_chain(get_settings().provider_specs)


async def perform_lookup(
    providers: Sequence[ProviderEntry] | None = None,
    target: Target = None,
    transport: Transport | None = None,
) -> LookupResponse:
    """Look up `target` (or the caller's own address) without touching the cache."""
    if providers is None:
        providers = default_providers()
    return await lookup_with_fallback(providers, target, transport=transport)


async def perform_cached_lookup(
    providers: Sequence[ProviderEntry] | None = None,
    target: Target = None,
    ttl: int | None = None,
    flush: bool = False,
    storage: CacheStorage | None = None,
    transport: Transport | None = None,
) -> LookupResponse:
    """Look up `target` (or the caller's own address), serving from the cache when possible.

    A present and unexpired record is returned without any network call unless
    `flush` is set. Otherwise the providers are tried in order, and the fresh
    response is stored with `ttl` (None: never expires, 0: expires at once) and
    persisted before it is returned. A failed lookup leaves the cache untouched;
    a failed save is raised even though the lookup itself succeeded.
    """
    if providers is None:
        providers = default_providers()
    target_ip = normalize_target(target)
    storage = storage or CacheStorage.from_settings()
    cache = load_or_empty(storage)

    if not flush:
        cached = cache.fresh_response(target_ip)
        if cached is not None:
            logger.info(f"Serving lookup from cache target={target_ip} ip={cached.ip} provider={cached.provider}")
            return cached

    logger.info(f"Cache miss, performing lookup target={target_ip} flush={flush}")
    response = await lookup_with_fallback(providers, target_ip, transport=transport)

    if target_ip is None:
        cache.update_current(response, ttl)
    else:
        cache.update_target(target_ip, response, ttl)
    cache.save()
    return response
