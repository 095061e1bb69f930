"""Shared fixtures — a recording fake provider and a test app."""

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from iplookup.common.config import Settings
from iplookup.lookup.provider import IPDataProvider
from iplookup.lookup.schemas import IPLookupResult
from iplookup.main import create_app

GOOGLE_DNS = IPLookupResult(
    ip="8.8.8.8",
    city="Mountain View",
    region="California",
    country="United States",
    postal="94043",
    latitude=37.42301,
    longitude=-122.083352,
    timezone="America/Los_Angeles",
    organization="GOOGLE",
    asn="AS15169",
)


# Raw ipapi.co answer for 8.8.8.8
IPAPI_GOOGLE = {
    "ip": "8.8.8.8",
    "network": "8.8.8.0/24",
    "version": "IPv4",
    "city": "Mountain View",
    "region": "California",
    "region_code": "CA",
    "country": "US",
    "country_name": "United States",
    "postal": "94043",
    "latitude": 37.42301,
    "longitude": -122.083352,
    "timezone": "America/Los_Angeles",
    "asn": "AS15169",
    "org": "GOOGLE",
}


class FakeProvider(IPDataProvider):
    """Answers from a dict; unknown addresses are a lookup-miss."""

    def __init__(self, table: Optional[Dict[str, IPLookupResult]] = None, error: Optional[Exception] = None):
        self.table = table if table is not None else {GOOGLE_DNS.ip: GOOGLE_DNS}
        self.error = error
        self.calls: List[str] = []

    async def lookup(self, ip: str) -> IPLookupResult:
        self.calls.append(ip)
        if self.error is not None:
            raise self.error
        return self.table.get(ip, IPLookupResult.empty(ip))


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, provider_timeout=1.0)


@pytest.fixture()
def client(settings: Settings, provider: FakeProvider):
    app = create_app(settings=settings, provider=provider)
    with TestClient(app) as c:
        yield c
