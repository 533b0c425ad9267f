from typing import Any

from pydantic import BaseModel, IPvAnyAddress, field_validator

from public_ip_lookup.models.request_models import LookupProvider


class LookupResponse(BaseModel):
    """Normalized lookup result returned by every provider.

    Only `ip` and `provider` are guaranteed; every other field is best effort and
    depends on what the provider exposes.
    """

    ip: IPvAnyAddress
    continent: str | None = None
    country: str | None = None
    country_code: str | None = None
    region: str | None = None
    region_code: str | None = None
    postal_code: str | None = None
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    time_zone: str | None = None
    # Autonomous System Number and Organization.
    asn: str | None = None
    asn_org: str | None = None
    hostname: str | None = None
    is_proxy: bool | None = None
    provider: LookupProvider

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_lat_lon(cls, value: Any) -> float | None:
        """Allow latitude/longitude to be provided as strings, numbers, or null.

        Providers may return these fields as strings; this validator normalizes them
        into floats while gracefully handling missing or invalid values.
        """
        if value is None:
            return None
        try:
            # For general GPS and mapping, 5-6 decimal places (e.g., 34.052235)
            return round(float(value), 6)
        except (TypeError, ValueError):
            return None

    @field_validator("asn", mode="before")
    @classmethod
    def _coerce_asn(cls, value: Any) -> str | None:
        # Some providers report the AS number as an integer.
        if value is None or value == "":
            return None
        return str(value)

    def __str__(self) -> str:
        lines = [f"IP: {self.ip}"]
        if self.continent:
            lines.append(f"Continent: {self.continent}")
        if self.country or self.country_code:
            lines.append(_labelled("Country", self.country, self.country_code))
        if self.region or self.region_code:
            lines.append(_labelled("Region", self.region, self.region_code))
        if self.postal_code:
            lines.append(f"Postal code: {self.postal_code}")
        if self.city:
            lines.append(f"City: {self.city}")
        if self.latitude is not None and self.longitude is not None:
            lines.append(f"Coordinates: {self.latitude}, {self.longitude}")
        if self.time_zone:
            lines.append(f"Time zone: {self.time_zone}")
        if self.asn_org or self.asn:
            lines.append(_labelled("Organization", self.asn_org, self.asn))
        if self.hostname:
            lines.append(f"Hostname: {self.hostname}")
        if self.is_proxy is not None:
            lines.append(f"Proxy: {self.is_proxy}")
        lines.append(f"Provider: {self.provider}")
        return "\n".join(lines)


def _labelled(label: str, name: str | None, code: str | None) -> str:
    if name and code:
        return f"{label}: {name} ({code})"
    return f"{label}: {name or code}"
