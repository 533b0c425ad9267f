from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from public_ip_lookup.logger import logger
from public_ip_lookup.models.response_models import ErrorResponse

# Query parameter -> (error code, client-facing message).
_FIELD_ERRORS = {
    "ip": ("invalid_ip", "The supplied IP address is not a valid IPv4 or IPv6 address."),
    "provider": ("invalid_provider", "The supplied provider is not supported."),
    "ttl": ("invalid_ttl", "The cache TTL must be a non-negative number of seconds."),
}
_INVALID_REQUEST = ("invalid_request", "Invalid request parameters")


def _requested_provider(request: Request) -> str | None:
    """The raw `provider` query parameter, if the client sent one."""
    return request.query_params.get("provider")


def _loggable_errors(exc: ValidationError) -> list[dict[str, Any]]:
    """Validation errors with `ctx` values (often exception objects) turned into strings."""
    errors = []
    for error in exc.errors():
        ctx = error.get("ctx")
        if isinstance(ctx, dict):
            error = {**error, "ctx": {key: str(value) for key, value in ctx.items()}}
        errors.append(error)
    return errors


def _classify(errors: list[dict[str, Any]]) -> tuple[str, str]:
    """Pick the code of the first offending query parameter we know about.

    Locations are either request level (`("query", "ip")`) or model level (`("ip",)`),
    so only the last element is looked at.
    """
    for error in errors:
        loc = error.get("loc") or ()
        if loc and loc[-1] in _FIELD_ERRORS:
            return _FIELD_ERRORS[loc[-1]]
    return _INVALID_REQUEST


async def pydantic_validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Turn validation errors raised while building `IPLookupRequest` into a 400."""
    provider = _requested_provider(request)
    errors = _loggable_errors(exc)
    logger.info(
        f"Rejected lookup request path={request.url.path} method={request.method} provider={provider} errors={errors}"
    )
    code, message = _classify(errors)
    payload = ErrorResponse(code=code, message=message, provider=provider)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload.model_dump())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Structured 500 for anything the endpoint did not map itself."""
    provider = _requested_provider(request)
    logger.exception(
        f"Unhandled exception {exc!r} path={request.url.path} method={request.method} provider={provider}"
    )
    payload = ErrorResponse(
        code="internal_error",
        message="An unexpected error occurred while processing the request.",
        provider=provider,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload.model_dump())
