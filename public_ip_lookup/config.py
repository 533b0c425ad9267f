import os
from dataclasses import dataclass
from functools import lru_cache

APP_NAME = "public-ip-lookup"
DEFAULT_CACHE_FILE_NAME = "lookup.cache"
DEFAULT_PROVIDERS = "ipwhois,ifconfig,ipinfo,freeipapi"


def _optional_int(value: str | None) -> int | None:
    if value is None or not value.strip() or value.strip().lower() == "none":
        return None
    return int(value)


@dataclass(frozen=True)
class Settings:
    """Library and API settings loaded from environment variables."""

    # Cache
    cache_dir: str | None = os.getenv("PUBLIC_IP_CACHE_DIR")
    cache_file_name: str = os.getenv("PUBLIC_IP_CACHE_FILE", DEFAULT_CACHE_FILE_NAME)
    cache_encryption: bool = os.getenv("PUBLIC_IP_CACHE_ENCRYPTION", "false").lower() == "true"
    cache_passphrase: str | None = os.getenv("PUBLIC_IP_CACHE_PASSPHRASE")
    cache_ttl: int | None = _optional_int(os.getenv("PUBLIC_IP_CACHE_TTL", "2"))

    # Lookup
    request_timeout: float = float(os.getenv("PUBLIC_IP_REQUEST_TIMEOUT", "5.0"))
    providers: str = os.getenv("PUBLIC_IP_PROVIDERS", DEFAULT_PROVIDERS)

    # API
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    @property
    def provider_specs(self) -> list[str]:
        """Split the comma separated provider chain into `"<name> [key]"` entries."""
        return [entry.strip() for entry in self.providers.split(",") if entry.strip()]

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.cache_file_name.strip():
            raise ValueError("PUBLIC_IP_CACHE_FILE must not be empty")

        if self.cache_ttl is not None and self.cache_ttl < 0:
            raise ValueError(f"PUBLIC_IP_CACHE_TTL must be >= 0, got {self.cache_ttl}")

        if self.request_timeout <= 0:
            raise ValueError(f"PUBLIC_IP_REQUEST_TIMEOUT must be positive, got {self.request_timeout}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
