import time

import pytest

from cloudflare_exporter.errors import NotFound
from cloudflare_exporter.model import TrafficTotals, Zone, ZoneTotals


def traffic(all=100, cached=60, uncached=40, encrypted=90, unencrypted=10,
            content_type=None, country=None, http_status=None):
    return TrafficTotals(
        all=all, cached=cached, uncached=uncached,
        ssl_encrypted=encrypted, ssl_unencrypted=unencrypted,
        content_type=content_type if content_type is not None else {"text/html": all},
        country=country if country is not None else {"US": all},
        http_status=http_status if http_status is not None else {"200": all},
    )


class FakeSource:
    """In-memory stats source. ``totals`` maps zone id to ZoneTotals or an exception."""

    def __init__(self, zones, totals, delay=0.0, list_error=None):
        self.zones = zones
        self.totals = totals
        self.delay = delay
        self.list_error = list_error
        self.fetched = []

    def list_zones(self):
        if self.list_error is not None:
            raise self.list_error
        return list(self.zones)

    def fetch_zone_totals(self, zone_id):
        self.fetched.append(zone_id)
        if self.delay:
            time.sleep(self.delay)
        result = self.totals.get(zone_id)
        if result is None:
            raise NotFound("unknown zone", zone_id)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def example_totals():
    return ZoneTotals(
        requests=traffic(),
        bandwidth=traffic(all=5000, cached=3000, uncached=2000, encrypted=4500, unencrypted=500),
    )


@pytest.fixture
def single_zone_source(example_totals):
    return FakeSource([Zone("z1", "example.com")], {"z1": example_totals})
