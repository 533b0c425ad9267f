from collections.abc import Iterable

from public_ip_lookup.clients.base import BaseIPLookupClient
from public_ip_lookup.clients.freeipapi_client import FreeIpApi
from public_ip_lookup.clients.getjsonip_client import GetJsonIp
from public_ip_lookup.clients.ifconfig_client import IfConfig
from public_ip_lookup.clients.ip_api_co_client import IpApiCo
from public_ip_lookup.clients.ip_api_com_client import IpApiCom
from public_ip_lookup.clients.ipapiio_client import IpApiIo
from public_ip_lookup.clients.ipbase_client import IpBase
from public_ip_lookup.clients.ipdata_client import IpData
from public_ip_lookup.clients.ipify_client import Ipify
from public_ip_lookup.clients.ipinfo_client import IpInfo
from public_ip_lookup.clients.ipleak_client import IpLeak
from public_ip_lookup.clients.iplocateio_client import IpLocateIo
from public_ip_lookup.clients.ipquery_client import IpQuery
from public_ip_lookup.clients.ipwhois_client import IpWhoIs
from public_ip_lookup.clients.mock_client import MockClient
from public_ip_lookup.clients.mullvad_client import Mullvad
from public_ip_lookup.clients.myip_client import MyIp
from public_ip_lookup.clients.myipcom_client import MyIpCom
from public_ip_lookup.errors import ProviderNotFoundError
from public_ip_lookup.models.request_models import LookupProvider, Parameters, Provider

ProviderEntry = tuple[LookupProvider, Parameters | None]


class IpLookupProviderFactory:
    """Factory for IP lookup provider clients.

    Given a LookupProvider identifier, returns a concrete client instance.
    """

    PROVIDERS_MAP: dict[Provider, type[BaseIPLookupClient]] = {
        Provider.ipapi_co: IpApiCo,
        Provider.ip_api_com: IpApiCom,
        Provider.ipinfo: IpInfo,
        Provider.ifconfig: IfConfig,
        Provider.ipwhois: IpWhoIs,
        Provider.ipbase: IpBase,
        Provider.ipquery: IpQuery,
        Provider.ipdata: IpData,
        Provider.freeipapi: FreeIpApi,
        Provider.myip: MyIp,
        Provider.ipify: Ipify,
        Provider.ip_api_io: IpApiIo,
        Provider.iplocate_io: IpLocateIo,
        Provider.ipleak: IpLeak,
        Provider.getjsonip: GetJsonIp,
        Provider.mullvad: Mullvad,
        Provider.myip_com: MyIpCom,
    }

    def __call__(self, provider: LookupProvider) -> BaseIPLookupClient:
        if provider.name is Provider.mock:
            return MockClient(provider.ip, provider.endpoint)
        client_cls = self.PROVIDERS_MAP[provider.name]
        return client_cls()

    @staticmethod
    def parse(value: str) -> ProviderEntry:
        """Parse `"<provider> [api_key]"` into an identifier and optional credentials.

        The provider name is matched case-insensitively; the key is kept verbatim.
        """
        tokens = value.split()
        if not tokens:
            raise ProviderNotFoundError("Provider not found: empty provider name")

        name = tokens[0].lower()
        try:
            provider = Provider(name)
        except ValueError as exc:
            raise ProviderNotFoundError(f"Provider not found: {name}") from exc
        if provider is Provider.mock:
            raise ProviderNotFoundError("Provider not found: the mock provider cannot be configured by name")

        parameters = Parameters(api_key=tokens[1]) if len(tokens) > 1 else None
        return LookupProvider(name=provider), parameters

    @classmethod
    def parse_chain(cls, values: Iterable[str]) -> list[ProviderEntry]:
        """Parse an ordered list of provider strings, e.g. from configuration."""
        return [cls.parse(value) for value in values]


def get_ip_lookup_provider_factory() -> IpLookupProviderFactory:
    """Dependency to provide an IpLookupProviderFactory instance."""
    return IpLookupProviderFactory()
