"""ActivityFeedBuilder: merge, window, sort newest first, cap."""

from datetime import timedelta

import pytest

from city_dashboard.application.dtos.records import RawDocument
from city_dashboard.application.services.activity_feed_builder import ActivityFeedBuilder
from city_dashboard.domain.enums import ActivityType, Locale, RecordType
from city_dashboard.domain.exceptions import ValidationException


def _doc(doc_id: str, created_at, **fields) -> RawDocument:
    return RawDocument(id=doc_id, data={"createdAt": created_at, **fields})


def test_feed_is_sorted_capped_and_within_window(now) -> None:
    per_type = {
        RecordType.SERVICE: [
            _doc("s1", now - timedelta(hours=1), name="Clinic"),
            _doc("s2", now - timedelta(days=8), name="Too old"),
        ],
        RecordType.PROPERTY: [
            _doc("p1", now - timedelta(hours=5), title="Flat"),
            _doc("p2", now - timedelta(days=2), title="Villa"),
        ],
        RecordType.NEWS: [
            _doc("n1", now - timedelta(minutes=10), title="Road works"),
            _doc("n2", now - timedelta(days=3), title="Festival"),
        ],
        RecordType.EMERGENCY: [_doc("e1", now - timedelta(days=1), name="Fire")],
    }
    feed = ActivityFeedBuilder().build(per_type, now, locale=Locale.EN)

    assert [e.id for e in feed] == ["news-n1", "service-s1", "property-p1", "emergency-e1", "property-p2"]
    assert all(a.time >= b.time for a, b in zip(feed, feed[1:]))
    assert all(e.time >= now - timedelta(days=7) for e in feed)


def test_descriptions_use_locale_templates(now) -> None:
    per_type = {RecordType.SERVICE: [_doc("s1", now, name="Clinic")]}
    (en,) = ActivityFeedBuilder().build(per_type, now, locale="en")
    (ar,) = ActivityFeedBuilder().build(per_type, now)
    assert en.type is ActivityType.NEW_SERVICE
    assert en.description == "New service added: Clinic"
    assert ar.description == "تمت إضافة خدمة جديدة: Clinic"


def test_records_without_usable_created_at_are_dropped(now) -> None:
    per_type = {
        RecordType.NEWS: [
            RawDocument(id="n1", data={"title": "No date"}),
            _doc("n2", "not a date", title="Bad date"),
            _doc("n3", (now - timedelta(days=1)).timestamp() * 1000, title="Epoch"),
        ]
    }
    feed = ActivityFeedBuilder().build(per_type, now)
    assert [e.id for e in feed] == ["news-n3"]


def test_equal_timestamps_keep_source_order(now) -> None:
    t = now - timedelta(hours=2)
    per_type = {
        RecordType.EMERGENCY: [_doc("e1", t, name="x")],
        RecordType.SERVICE: [_doc("s1", t, name="x")],
        RecordType.PROPERTY: [_doc("p1", t, title="x")],
    }
    feed = ActivityFeedBuilder().build(per_type, now)
    assert [e.id for e in feed] == ["service-s1", "property-p1", "emergency-e1"]


def test_output_limit(now) -> None:
    per_type = {
        RecordType.NEWS: [_doc(f"n{i}", now - timedelta(hours=i), title="t") for i in range(10)]
    }
    feed = ActivityFeedBuilder().build(per_type, now, output_limit=3)
    assert [e.id for e in feed] == ["news-n0", "news-n1", "news-n2"]


def test_empty_sources_give_empty_feed(now) -> None:
    assert ActivityFeedBuilder().build({}, now) == []


def test_invalid_parameters_are_rejected(now) -> None:
    with pytest.raises(ValidationException):
        ActivityFeedBuilder().build({}, now, activity_window_days=0)
    with pytest.raises(ValidationException):
        ActivityFeedBuilder().build({}, now, output_limit=-1)
    with pytest.raises(ValidationException) as exc_info:
        ActivityFeedBuilder().build({}, now, locale="fr")
    assert exc_info.value.details == {"field": "locale"}


def test_each_source_is_capped_at_its_fetch_limit(now) -> None:
    per_type = {
        RecordType.NEWS: [_doc(f"n{i}", now - timedelta(hours=i), title="t") for i in range(6)],
        RecordType.EMERGENCY: [_doc(f"e{i}", now - timedelta(hours=i), name="x") for i in range(6)],
    }
    feed = ActivityFeedBuilder().build(
        per_type, now, per_source_fetch_limit=2, emergency_fetch_limit=1, output_limit=10
    )
    assert [e.id for e in feed] == ["news-n0", "emergency-e0", "news-n1"]


@pytest.mark.parametrize("field", ["per_source_fetch_limit", "emergency_fetch_limit"])
def test_non_positive_fetch_limits_are_rejected(now, field: str) -> None:
    with pytest.raises(ValidationException) as exc_info:
        ActivityFeedBuilder().build({}, now, **{field: 0})
    assert exc_info.value.details == {"field": field}
