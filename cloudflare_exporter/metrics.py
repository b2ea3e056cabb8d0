from typing import NamedTuple, Optional, Tuple

from prometheus_client import Counter, Histogram


class Descriptor(NamedTuple):
    name: str
    documentation: str
    labels: Tuple[str, ...]
    # where the value comes from: ZoneTotals.<group>.<field>
    group: str
    field: str

    @property
    def breakdown(self) -> Optional[str]:
        return self.labels[1] if len(self.labels) > 1 else None


def _zone(name, doc, group, field):
    return Descriptor(name, doc, ("zone",), group, field)


def _per(name, doc, label, group, field):
    return Descriptor(name, doc, ("zone", label), group, field)


# Requests
ZONE_REQUESTS_TOTAL = _zone("cloudflare_zone_requests_total", "Number of requests for zone", "requests", "all")
ZONE_REQUESTS_CACHED = _zone("cloudflare_zone_requests_cached", "Number of cached requests for zone", "requests", "cached")
ZONE_REQUESTS_UNCACHED = _zone("cloudflare_zone_requests_uncached", "Number of uncached requests for zone", "requests", "uncached")
ZONE_REQUESTS_SSL_ENCRYPTED = _zone("cloudflare_zone_requests_ssl_encrypted", "Number of encrypted requests for zone", "requests", "ssl_encrypted")
ZONE_REQUESTS_SSL_UNENCRYPTED = _zone("cloudflare_zone_requests_ssl_unencrypted", "Number of unencrypted requests for zone", "requests", "ssl_unencrypted")
ZONE_REQUESTS_CONTENT_TYPE = _per("cloudflare_zone_requests_content_type", "Number of requests for zone per content type", "content_type", "requests", "content_type")
ZONE_REQUESTS_COUNTRY = _per("cloudflare_zone_requests_country", "Number of requests for zone per country", "country", "requests", "country")
ZONE_REQUESTS_STATUS = _per("cloudflare_zone_requests_status", "Number of requests for zone per HTTP status", "status", "requests", "http_status")

# Bandwidth
ZONE_BANDWIDTH_TOTAL = _zone("cloudflare_zone_bandwidth_total", "Total bandwidth per zone in bytes", "bandwidth", "all")
ZONE_BANDWIDTH_CACHED = _zone("cloudflare_zone_bandwidth_cached", "Cached bandwidth per zone in bytes", "bandwidth", "cached")
ZONE_BANDWIDTH_UNCACHED = _zone("cloudflare_zone_bandwidth_uncached", "Uncached bandwidth per zone in bytes", "bandwidth", "uncached")
ZONE_BANDWIDTH_SSL_ENCRYPTED = _zone("cloudflare_zone_bandwidth_ssl_encrypted", "Encrypted bandwidth per zone in bytes", "bandwidth", "ssl_encrypted")
ZONE_BANDWIDTH_SSL_UNENCRYPTED = _zone("cloudflare_zone_bandwidth_ssl_unencrypted", "Unencrypted bandwidth per zone in bytes", "bandwidth", "ssl_unencrypted")
ZONE_BANDWIDTH_CONTENT_TYPE = _per("cloudflare_zone_bandwidth_content_type", "Bandwidth per zone per content type in bytes", "content_type", "bandwidth", "content_type")
ZONE_BANDWIDTH_COUNTRY = _per("cloudflare_zone_bandwidth_country", "Bandwidth per zone per country in bytes", "country", "bandwidth", "country")
ZONE_BANDWIDTH_STATUS = _per("cloudflare_zone_bandwidth_status", "Bandwidth per zone per HTTP status in bytes", "status", "bandwidth", "http_status")

DESCRIPTORS = (
    ZONE_REQUESTS_TOTAL,
    ZONE_REQUESTS_CACHED,
    ZONE_REQUESTS_UNCACHED,
    ZONE_REQUESTS_SSL_ENCRYPTED,
    ZONE_REQUESTS_SSL_UNENCRYPTED,
    ZONE_REQUESTS_CONTENT_TYPE,
    ZONE_REQUESTS_COUNTRY,
    ZONE_REQUESTS_STATUS,
    ZONE_BANDWIDTH_TOTAL,
    ZONE_BANDWIDTH_CACHED,
    ZONE_BANDWIDTH_UNCACHED,
    ZONE_BANDWIDTH_SSL_ENCRYPTED,
    ZONE_BANDWIDTH_SSL_UNENCRYPTED,
    ZONE_BANDWIDTH_CONTENT_TYPE,
    ZONE_BANDWIDTH_COUNTRY,
    ZONE_BANDWIDTH_STATUS,
)


def describe() -> Tuple[Descriptor, ...]:
    return DESCRIPTORS


# Exporter self-metrics
SCRAPES = Counter("cloudflare_exporter_scrapes_total", "Scrapes of the Cloudflare API", ["status"])
ZONE_ERRORS = Counter("cloudflare_exporter_zone_errors_total", "Zones left out of a scrape", ["reason"])
SCRAPE_DURATION = Histogram("cloudflare_exporter_scrape_duration_seconds", "Scrape duration (s)", buckets=(0.1,0.25,0.5,1,2,5,10,30))
