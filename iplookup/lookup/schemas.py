from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class IPLookupResult(BaseModel):
    """Location/network metadata for one IP address."""

    model_config = ConfigDict(frozen=True)

    ip: str
    city: str | None = None
    region: str | None = None
    country: str | None = None
    postal: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    organization: str | None = None
    asn: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _pair_coordinates(cls, data: Any) -> Any:
        # latitude/longitude come as a pair or not at all
        if isinstance(data, dict):
            lat, lon = data.get("latitude"), data.get("longitude")
            if (lat is None) != (lon is None):
                data = {**data, "latitude": None, "longitude": None}
        return data

    @classmethod
    def empty(cls, ip: str) -> "IPLookupResult":
        """Result for a lookup-miss: only the identifier is known."""
        return cls(ip=ip)


class ErrorResponse(BaseModel):
    error: str
    message: str
