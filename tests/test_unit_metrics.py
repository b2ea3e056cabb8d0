from cloudflare_exporter.metrics import DESCRIPTORS, describe
from cloudflare_exporter.model import TrafficTotals


def test_catalog_has_sixteen_distinct_descriptors():
    d = describe()
    assert len(d) == 16
    assert len({x.name for x in d}) == 16
    assert [x.group for x in d] == ["requests"] * 8 + ["bandwidth"] * 8


def test_describe_is_stable():
    assert describe() == describe()
    assert [x.name for x in describe()] == [x.name for x in DESCRIPTORS]


def test_label_schemas():
    labels = {x.name: x.labels for x in describe()}
    assert labels["cloudflare_zone_requests_total"] == ("zone",)
    assert labels["cloudflare_zone_requests_content_type"] == ("zone", "content_type")
    assert labels["cloudflare_zone_bandwidth_country"] == ("zone", "country")
    assert labels["cloudflare_zone_bandwidth_status"] == ("zone", "status")


def test_descriptors_point_at_real_fields():
    fields = set(TrafficTotals.__dataclass_fields__)
    for x in describe():
        assert x.field in fields
        assert (x.breakdown is None) == (len(x.labels) == 1)
