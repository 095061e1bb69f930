import ipaddress
import logging
from typing import Optional

from iplookup.exceptions import InvalidIdentifier, MethodNotAllowed, MissingIdentifier
from iplookup.lookup.provider import IPDataProvider
from iplookup.lookup.schemas import IPLookupResult

logger = logging.getLogger(__name__)


def normalize_ip(raw: str) -> str:
    """Return the canonical text form of *raw*, or raise InvalidIdentifier."""
    try:
        return str(ipaddress.ip_address(raw.strip()))
    except ValueError:
        raise InvalidIdentifier(raw)


async def handle_lookup(
    method: str, ip: Optional[str], provider: IPDataProvider
) -> IPLookupResult:
    """
    Validate the request and look up *ip*.

    Method and identifier are checked before the provider is touched.
    Raises a RequestError subclass for a bad request and lets UpstreamError
    from the provider propagate.
    """
    if (method or "").upper() != "GET":
        raise MethodNotAllowed(method)

    if ip is None or not ip.strip():
        raise MissingIdentifier()

    logger.info("received: %s /ip/%s", method, ip)
    result = await provider.lookup(normalize_ip(ip))
    logger.info("response from: %s /ip/%s status: 200 (country=%s)", method, result.ip, result.country)
    return result
