from collections.abc import Sequence
from typing import Any


class AppError(Exception):
    """Base application error for the public IP lookup library."""


class IpProviderError(AppError):
    """Base error for failures attributed to a single lookup provider."""

    def __init__(self, message: str, provider: Any = None) -> None:
        super().__init__(message)
        self.provider = provider

    def __str__(self) -> str:
        message = super().__str__()
        if self.provider is None:
            return message
        return f"{self.provider}: {message}"


class TransportError(IpProviderError):
    """Raised when the request never produced an HTTP response (connection, DNS, TLS, timeout)."""


class TooManyRequestsError(IpProviderError):
    """Raised when the provider answers with HTTP 429."""


class RequestStatusError(IpProviderError):
    """Raised when the provider answers with any other non-200 status."""

    def __init__(self, message: str, status_code: int, provider: Any = None) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code


class ParseError(IpProviderError):
    """Raised when the provider reply cannot be decoded into a lookup response."""


class UpstreamServiceError(IpProviderError):
    """Raised when the provider reports a failure inside an otherwise successful reply."""


class ReservedIpError(UpstreamServiceError):
    """Raised when the provider refuses a reserved/private address (e.g. 127.0.0.1, 192.168.x.x)."""


class ConfigurationError(AppError):
    """Base error for invalid lookup configuration."""


class ProviderNotFoundError(ConfigurationError):
    """Raised when a provider identifier string does not name a known provider."""


class NoProvidersError(ConfigurationError):
    """Raised when a fallback lookup is requested with an empty provider list."""


class TargetNotSupportedError(ConfigurationError):
    """Raised when a target address is requested from a provider that only resolves the caller."""

    def __init__(self, message: str, provider: Any = None) -> None:
        super().__init__(message)
        self.provider = provider


class InvalidIpError(ConfigurationError):
    """Raised when the supplied target IP address is syntactically invalid."""


class AllProvidersFailedError(AppError):
    """Raised when every provider of a fallback lookup failed.

    `errors` keeps the per-provider failures in the order the providers were tried.
    """

    def __init__(self, errors: Sequence[AppError]) -> None:
        self.errors = list(errors)
        details = "; ".join(str(error) for error in self.errors)
        super().__init__(f"All {len(self.errors)} lookup providers failed: {details}")


class CacheError(AppError):
    """Base error for response cache storage failures."""


class CacheIOError(CacheError):
    """Raised when the cache file cannot be read, written or removed."""


class CacheNotFoundError(CacheIOError):
    """Raised when there is no cache file yet."""


class CacheSerdeError(CacheError):
    """Raised when the cache contents cannot be (de)serialized."""


class CacheEncryptionError(CacheError):
    """Raised when the cache contents cannot be encrypted or decrypted."""


class CacheDecodeError(CacheError):
    """Raised when the decrypted cache contents are not valid UTF-8."""
