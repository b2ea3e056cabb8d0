import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Iterable, List, NamedTuple, Optional, Set, Tuple

from prometheus_client.core import CounterMetricFamily

from cloudflare_exporter.errors import NotFound, SourceError
from cloudflare_exporter.metrics import DESCRIPTORS, SCRAPE_DURATION, SCRAPES, ZONE_ERRORS, Descriptor
from cloudflare_exporter.model import Zone, ZoneTotals
from cloudflare_exporter.source import StatsSource

logger = logging.getLogger(__name__)


class Sample(NamedTuple):
    descriptor: Descriptor
    value: float
    labels: Tuple[str, ...]


class SampleSink:
    """Thread-safe sample buffer shared by the per-zone workers of one scrape.

    Once closed, further writes are dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._samples: List[Sample] = []
        self._zone_ids: Set[str] = set()
        self._closed = False

    def extend(self, samples: Iterable[Sample], zone_id: Optional[str] = None) -> bool:
        with self._lock:
            if self._closed:
                return False
            self._samples.extend(samples)
            if zone_id is not None:
                self._zone_ids.add(zone_id)
            return True

    def zone_ids(self) -> Set[str]:
        with self._lock:
            return set(self._zone_ids)

    def close(self) -> None:
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def samples(self) -> List[Sample]:
        with self._lock:
            return list(self._samples)

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)


def zone_samples(zone_name: str, totals: ZoneTotals) -> List[Sample]:
    """Flatten one zone's totals, in catalog order, one sample per breakdown key."""
    samples = []
    for d in DESCRIPTORS:
        value = getattr(getattr(totals, d.group), d.field)
        if d.breakdown is None:
            samples.append(Sample(d, float(value), (zone_name,)))
        else:
            for label, count in value.items():
                samples.append(Sample(d, float(count), (zone_name, label)))
    return samples


def _failed(future) -> bool:
    """True when a worker finished after a source error, already counted by reason."""
    return future.done() and not future.cancelled() and future.result() is False


class ZoneCollector:
    """Prometheus collector translating per-zone analytics totals into counters.

    Each scrape lists the zones, then fetches every zone's totals on its own
    worker thread. A zone whose fetch fails is left out of the scrape; a failed
    zone listing fails the whole scrape.
    """

    def __init__(self, source: StatsSource, timeout: Optional[float] = None, max_workers: Optional[int] = None):
        self.source = source
        self.timeout = timeout
        self.max_workers = max_workers

    def describe(self):
        return [CounterMetricFamily(d.name, d.documentation, labels=d.labels) for d in DESCRIPTORS]

    def collect(self):
        sink = SampleSink()
        t0 = time.perf_counter()
        try:
            self.scrape(sink)
        except SourceError:
            SCRAPES.labels("error").inc()
            raise
        finally:
            SCRAPE_DURATION.observe(time.perf_counter() - t0)
        SCRAPES.labels("success").inc()

        families = {d: CounterMetricFamily(d.name, d.documentation, labels=d.labels) for d in DESCRIPTORS}
        for s in sink.samples():
            families[s.descriptor].add_metric(s.labels, s.value)
        yield from families.values()

    def scrape(self, sink: SampleSink) -> int:
        """Fetch every zone into ``sink``; returns the number of zones emitted.

        Raises SourceError when the zone list cannot be fetched.
        """
        try:
            zones = self.source.list_zones()
        except SourceError as e:
            logger.error("could not list zones: %s", e)
            raise
        if not zones:
            return 0

        workers = len(zones) if self.max_workers is None else min(len(zones), self.max_workers)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="zone")
        pending = set()
        try:
            futures = {executor.submit(self._collect_zone, zone, sink): zone for zone in zones}
            done, pending = wait(futures, timeout=self.timeout)
            if pending:
                sink.close()
                for f in pending:
                    f.cancel()
                # the sink is closed, so this snapshot of late finishers is final
                accepted = sink.zone_ids()
                abandoned = [
                    futures[f] for f in pending
                    if futures[f].id not in accepted and not _failed(f)
                ]
                if abandoned:
                    ZONE_ERRORS.labels("timeout").inc(len(abandoned))
                    logger.warning(
                        "abandoning %d of %d zones after %ss: %s",
                        len(abandoned), len(zones), self.timeout,
                        ", ".join(sorted(z.name for z in abandoned)),
                    )
            for f in done:
                # unexpected worker errors fail the scrape
                f.result()
            accepted = sink.zone_ids()
            emitted = sum(1 for zone in zones if zone.id in accepted)
        finally:
            # abandoned workers are bounded by the source's own request timeout
            executor.shutdown(wait=not pending, cancel_futures=True)

        logger.debug("scraped %d of %d zones, %d samples", emitted, len(zones), len(sink))
        return emitted

    def _collect_zone(self, zone: Zone, sink: SampleSink) -> Optional[bool]:
        try:
            totals = self.source.fetch_zone_totals(zone.id)
        except NotFound as e:
            ZONE_ERRORS.labels("not_found").inc()
            logger.warning("zone %s vanished before its totals were fetched: %s", zone.name, e)
            return False
        except SourceError as e:
            ZONE_ERRORS.labels("unavailable").inc()
            logger.warning("skipping zone %s: %s", zone.name, e)
            return False
        if not sink.extend(zone_samples(zone.name, totals), zone.id):
            # dropped, the scrape was abandoned
            return None
        return True
