from enum import Enum
from ipaddress import ip_address

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Provider(str, Enum):
    """Supported IP lookup providers."""

    ipapi_co = "ipapico"
    ip_api_com = "ipapicom"
    ipinfo = "ipinfo"
    ifconfig = "ifconfig"
    ipwhois = "ipwhois"
    ipbase = "ipbase"
    ipquery = "ipquery"
    ipdata = "ipdata"
    freeipapi = "freeipapi"
    myip = "myip"
    ipify = "ipify"
    ip_api_io = "ipapiio"
    iplocate_io = "iplocateio"
    ipleak = "ipleak"
    getjsonip = "getjsonip"
    mullvad = "mullvad"
    myip_com = "myipcom"
    mock = "mock"


class LookupProvider(BaseModel):
    """Identifier of a lookup backend.

    Real providers are identified by their tag alone. The `mock` tag additionally
    carries the address it answers with and, optionally, an HTTP endpoint to hit
    instead of answering in-process. Instances are immutable and hashable, and
    they are persisted as part of every cached response.
    """

    model_config = ConfigDict(frozen=True)

    name: Provider
    ip: str | None = None
    endpoint: str | None = None

    @model_validator(mode="after")
    def _check_mock_fields(self) -> "LookupProvider":
        if self.name is Provider.mock:
            if not self.ip:
                raise ValueError("the mock provider requires an ip")
        elif self.ip is not None or self.endpoint is not None:
            raise ValueError("only the mock provider accepts ip/endpoint settings")
        return self

    @classmethod
    def mock(cls, ip: str, endpoint: str | None = None) -> "LookupProvider":
        return cls(name=Provider.mock, ip=ip, endpoint=endpoint)

    def __str__(self) -> str:
        if self.name is Provider.mock:
            return f"mock({self.ip})"
        return self.name.value


class Parameters(BaseModel):
    """Credentials attached to a provider at lookup time."""

    model_config = ConfigDict(frozen=True)

    api_key: str

    def __repr__(self) -> str:
        return "Parameters(api_key='***')"


class IPLookupRequest(BaseModel):
    """Request model for the lookup endpoint, read from query parameters.

    If `ip` is provided, the service looks up that explicit IP address.
    If `ip` is omitted or null, the service resolves its own public address.

    The optional `provider` parameter restricts the lookup to a single upstream
    provider. If omitted, the configured provider chain is tried in order.
    """

    ip: str | None = Field(
        default=None,
        description="IPv4 or IPv6 address to look up. If omitted, the service's own public IP is used.",
        examples=["8.8.8.8", "2001:4860:4860::8888"],
    )
    provider: Provider | None = Field(
        default=None,
        description="Upstream provider to use for the lookup. Defaults to the configured chain.",
        examples=["ipwhois", "ipapicom"],
    )
    ttl: int | None = Field(
        default=None,
        ge=0,
        description="Seconds the result stays cached. Defaults to PUBLIC_IP_CACHE_TTL.",
    )
    flush: bool = Field(default=False, description="Ignore any cached value and query the provider.")

    @field_validator("ip", mode="before")
    @classmethod
    def _validate_ip(cls, value: str | None) -> str | None:
        """Validate that ip is either empty/None or a valid IP address (IPv4 or IPv6).

        - None or blank string -> treated as None (own address lookup, no error).
        - Non-blank -> must be a valid IP literal, otherwise a validation error
          is raised and the endpoint handler is never invoked.
        """
        if value is None:
            return None

        value_str = str(value).strip()
        if not value_str:
            return None

        try:
            ip_address(value_str)
        except ValueError as exc:
            raise ValueError("ip must be a valid IPv4 or IPv6 address") from exc

        return value_str

    @field_validator("provider")
    @classmethod
    def _reject_mock(cls, value: Provider | None) -> Provider | None:
        if value is Provider.mock:
            raise ValueError("the mock provider is not available through the API")
        return value
