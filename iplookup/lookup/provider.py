"""
IP data providers.

The only concrete provider is ipapi.co (https://ipapi.co/{ip}/json/).
Its field names are mapped onto IPLookupResult here so nothing outside
this module knows the upstream shape.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from iplookup.common.config import Settings
from iplookup.exceptions import UpstreamError, UpstreamTimeout
from iplookup.lookup.schemas import IPLookupResult

logger = logging.getLogger(__name__)

# ipapi.co field -> IPLookupResult field
FIELD_MAP = {
    "city": "city",
    "region": "region",
    "country_name": "country",
    "postal": "postal",
    "latitude": "latitude",
    "longitude": "longitude",
    "timezone": "timezone",
    "org": "organization",
    "asn": "asn",
}

# "reason" values that mean the provider itself is unhealthy, not a miss
_UPSTREAM_REASONS = {"RateLimited", "Quota exceeded"}


class IPDataProvider(ABC):
    """Source of IP metadata. Implementations must not keep per-request state."""

    @abstractmethod
    async def lookup(self, ip: str) -> IPLookupResult:
        """
        Return metadata for *ip* (already validated and normalised).

        A lookup-miss is returned as IPLookupResult.empty(ip).
        Raises UpstreamError when the source cannot answer.
        """
        raise NotImplementedError


def build_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.provider_timeout,
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
    )


class IpapiProvider(IPDataProvider):
    def __init__(self, client: httpx.AsyncClient, url_template: str):
        self._client = client
        self._url_template = url_template

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "IpapiProvider":
        return cls(client, settings.provider_url)

    async def lookup(self, ip: str) -> IPLookupResult:
        url = self._url_template.format(ip=ip)
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            logger.warning("ipapi timeout for %s: %s", ip, e)
            raise UpstreamTimeout(f"IP data provider timed out looking up {ip}")
        except httpx.HTTPError as e:
            logger.warning("ipapi request failed for %s: %s", ip, e)
            raise UpstreamError(f"IP data provider unreachable: {e.__class__.__name__}")

        if response.status_code == 429 or response.status_code >= 500:
            logger.warning("ipapi answered %s for %s", response.status_code, ip)
            raise UpstreamError(f"IP data provider answered HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            logger.warning("ipapi returned a non-JSON body for %s", ip)
            raise UpstreamError("IP data provider returned an unreadable body")

        if not isinstance(data, dict):
            raise UpstreamError("IP data provider returned an unexpected body")

        return parse_payload(ip, data)


def parse_payload(ip: str, data: Dict[str, Any]) -> IPLookupResult:
    """Map an ipapi.co JSON object to an IPLookupResult."""
    if data.get("error"):
        reason = data.get("reason") or "unknown"
        if reason in _UPSTREAM_REASONS:
            logger.warning("ipapi refused lookup for %s: %s", ip, reason)
            raise UpstreamError(f"IP data provider refused the lookup: {reason}")
        # Reserved / private / unknown addresses: documented lookup-miss
        logger.info("no data for %s (%s)", ip, reason)
        return IPLookupResult.empty(ip)

    fields: Dict[str, Optional[Any]] = {}
    for upstream_key, key in FIELD_MAP.items():
        value = data.get(upstream_key)
        if value in ("", None):
            continue
        fields[key] = value
    try:
        return IPLookupResult(ip=ip, **fields)
    except ValidationError as e:
        logger.warning("ipapi body for %s did not validate: %s", ip, e)
        raise UpstreamError("IP data provider returned an unexpected body")
