# Zone and analytics totals as returned by the Cloudflare dashboard API
from dataclasses import dataclass, field
from typing import Dict, Mapping

BREAKDOWNS = ("content_type", "country", "http_status")


@dataclass(frozen=True)
class Zone:
    id: str
    name: str

    @classmethod
    def from_api(cls, data: Mapping) -> "Zone":
        return cls(id=str(data["id"]), name=str(data["name"]))


def _count(data: Mapping, key: str) -> int:
    value = data[key]
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} is not an integer: {value!r}")
    return value


def _breakdown(data: Mapping, key: str) -> Dict[str, int]:
    raw = data.get(key) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"{key} is not a mapping: {raw!r}")
    return {str(label): _count(raw, label) for label in raw}


@dataclass(frozen=True)
class TrafficTotals:
    """One group of zone totals. Request counts or bytes, depending on the group."""

    all: int
    cached: int
    uncached: int
    ssl_encrypted: int
    ssl_unencrypted: int
    content_type: Dict[str, int] = field(default_factory=dict)
    country: Dict[str, int] = field(default_factory=dict)
    http_status: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Mapping) -> "TrafficTotals":
        ssl = data.get("ssl")
        if not isinstance(ssl, Mapping):
            raise ValueError(f"ssl is not a mapping: {ssl!r}")
        return cls(
            all=_count(data, "all"),
            cached=_count(data, "cached"),
            uncached=_count(data, "uncached"),
            ssl_encrypted=_count(ssl, "encrypted"),
            ssl_unencrypted=_count(ssl, "unencrypted"),
            **{name: _breakdown(data, name) for name in BREAKDOWNS},
        )


@dataclass(frozen=True)
class ZoneTotals:
    requests: TrafficTotals
    bandwidth: TrafficTotals

    @classmethod
    def from_api(cls, totals: Mapping) -> "ZoneTotals":
        """Build from the ``result.totals`` object of the dashboard endpoint.

        Raises ValueError (or KeyError for absent counters) on a malformed payload.
        """
        return cls(
            requests=TrafficTotals.from_api(totals["requests"]),
            bandwidth=TrafficTotals.from_api(totals["bandwidth"]),
        )
