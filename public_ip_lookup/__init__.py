"""Public IP address and geolocation lookups across interchangeable providers.

Example:
    import asyncio
    from public_ip_lookup import LookupProvider, Provider, perform_cached_lookup

    response = asyncio.run(
        perform_cached_lookup([(LookupProvider(name=Provider.ipwhois), None)], ttl=60)
    )
    print(response)

Synchronous callers use the same functions from `public_ip_lookup.blocking`.
"""

from public_ip_lookup.cache import CacheStorage, ResponseCache, ResponseRecord
from public_ip_lookup.errors import (
    AllProvidersFailedError,
    AppError,
    CacheError,
    ConfigurationError,
    IpProviderError,
)
from public_ip_lookup.factory import IpLookupProviderFactory
from public_ip_lookup.lookup import perform_cached_lookup, perform_lookup
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import LookupProvider, Parameters, Provider
from public_ip_lookup.service import LookupService, lookup_with_fallback

__all__ = [
    "AllProvidersFailedError",
    "AppError",
    "CacheError",
    "CacheStorage",
    "ConfigurationError",
    "IpLookupProviderFactory",
    "IpProviderError",
    "LookupProvider",
    "LookupResponse",
    "LookupService",
    "Parameters",
    "Provider",
    "ResponseCache",
    "ResponseRecord",
    "lookup_with_fallback",
    "perform_cached_lookup",
    "perform_lookup",
]
