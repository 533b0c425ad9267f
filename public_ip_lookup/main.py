from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, status
from pydantic import ValidationError

from public_ip_lookup.cache import CacheStorage
from public_ip_lookup.config import get_settings
from public_ip_lookup.errors import (
    AllProvidersFailedError,
    CacheError,
    ConfigurationError,
    InvalidIpError,
    ReservedIpError,
    TargetNotSupportedError,
)
from public_ip_lookup.exception_handlers import (
    pydantic_validation_exception_handler,
    unhandled_exception_handler,
)
from public_ip_lookup.factory import ProviderEntry
from public_ip_lookup.logger import configure_logging, logger
from public_ip_lookup.lookup import default_providers, perform_cached_lookup
from public_ip_lookup.models.common import LookupResponse
from public_ip_lookup.models.request_models import IPLookupRequest, LookupProvider, Provider
from public_ip_lookup.models.response_models import ErrorResponse, HealthResponse
from public_ip_lookup.service import default_transport
from public_ip_lookup.transport import Transport

configure_logging()

app = FastAPI(
    title="Public IP Lookup Service",
    version="0.1.0",
    description="Public IP and geolocation lookups across interchangeable providers, with a TTL disk cache.",
)
logger.info("Started Public IP Lookup Service")


def get_cache_storage() -> CacheStorage:
    """Dependency to provide the configured cache location."""
    return CacheStorage.from_settings()


def get_lookup_transport() -> Transport:
    """Dependency to provide the HTTP transport used to reach providers."""
    return default_transport()


def _providers_for(provider: Provider | None) -> list[ProviderEntry]:
    """Configured chain, or the single requested provider with its configured key (if any)."""
    chain = default_providers()
    if provider is None:
        return chain
    matching = [entry for entry in chain if entry[0].name is provider]
    return matching or [(LookupProvider(name=provider), None)]


def _error(status_code: int, code: str, message: str, provider: Provider | None) -> HTTPException:
    detail = ErrorResponse(code=code, message=message, provider=provider.value if provider else None)
    return HTTPException(status_code=status_code, detail=detail.model_dump())


# Register global exception handlers using the shared handlers module.
app.add_exception_handler(ValidationError, pydantic_validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get(
    "/health",
    tags=["health"],
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="ok")


@app.get(
    "/v1/ip/lookup",
    response_model=LookupResponse,
    status_code=status.HTTP_200_OK,
    tags=["ip"],
    summary="Look up the public IP address and geolocation of this service or of a given IP.",
)
async def ip_lookup(
    request: Request,
    query: Annotated[IPLookupRequest, Depends()],
    storage: Annotated[CacheStorage, Depends(get_cache_storage)],
    transport: Annotated[Transport, Depends(get_lookup_transport)],
) -> LookupResponse:
    """Look up either a specific IP or this service's own public IP.

    - If `query.ip` is provided, that IP is looked up.
    - Otherwise, the public address the service itself is reachable from is resolved.
    - Results are served from the cache while they are fresh, unless `query.flush` is set.
    """
    ip = query.ip
    provider = query.provider
    ttl = query.ttl if query.ttl is not None else get_settings().cache_ttl

    logger.info(
        "Performing IP lookup "
        f"path={request.url.path} method={request.method} ip={ip} provider={provider} ttl={ttl} flush={query.flush}"
    )

    try:
        return await perform_cached_lookup(
            _providers_for(provider),
            target=ip,
            ttl=ttl,
            flush=query.flush,
            storage=storage,
            transport=transport,
        )
    except InvalidIpError as exc:
        logger.error(f"Invalid IP error during lookup path={request.url.path} ip={ip} error={exc}")
        raise _error(status.HTTP_400_BAD_REQUEST, "invalid_ip", str(exc), provider) from exc
    except ConfigurationError as exc:
        logger.exception(f"Lookup misconfigured path={request.url.path} error={exc}")
        raise _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "configuration_error", str(exc), provider) from exc
    except AllProvidersFailedError as exc:
        if any(isinstance(error, ReservedIpError) for error in exc.errors):
            logger.error(f"Reserved/private IP used for lookup path={request.url.path} ip={ip} error={exc}")
            raise _error(status.HTTP_400_BAD_REQUEST, "reserved_ip", str(exc), provider) from exc
        if all(isinstance(error, TargetNotSupportedError) for error in exc.errors):
            logger.error(f"Target lookup not supported path={request.url.path} ip={ip} provider={provider}")
            raise _error(status.HTTP_400_BAD_REQUEST, "target_not_supported", str(exc), provider) from exc
        logger.error(f"Upstream IP providers failed path={request.url.path} ip={ip} provider={provider} error={exc}")
        raise _error(status.HTTP_502_BAD_GATEWAY, "upstream_error", str(exc), provider) from exc
    except CacheError as exc:
        logger.exception(f"Response cache failure path={request.url.path} ip={ip} error={exc}")
        raise _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "cache_error", str(exc), provider) from exc
