"""FirestoreRecordFetcher against a mocked Firestore REST API (httpx.MockTransport)."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from city_dashboard.application.dtos.records import CountSelector
from city_dashboard.domain.exceptions import FetchFailure
from city_dashboard.infrastructure.firebase._rest_client import FirestoreRESTClient
from city_dashboard.infrastructure.firebase.repositories.record_fetcher_firestore import (
    FirestoreRecordFetcher,
)

_DOCS = "projects/demo/databases/(default)/documents"


class _Credentials:
    """Always-valid service account credentials."""

    valid = True
    token = "test-token"


def _doc(path: str, **fields) -> dict:
    return {"name": f"{_DOCS}/{path}", "fields": fields}


def _fetcher(handler) -> FirestoreRecordFetcher:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirestoreRecordFetcher(
        FirestoreRESTClient("demo", _Credentials(), http_client=http, page_size=2)
    )


async def test_fetch_collection_follows_page_tokens() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        assert request.headers["Authorization"] == "Bearer test-token"
        if request.url.params.get("pageToken") == "page-2":
            return httpx.Response(200, json={"documents": [_doc("users/u3")]})
        return httpx.Response(
            200,
            json={
                "documents": [
                    _doc("users/u1", createdAt={"timestampValue": "2025-01-02T03:04:05Z"}),
                    _doc("users/u2", name={"stringValue": "Mona"}),
                ],
                "nextPageToken": "page-2",
            },
        )

    docs = await _fetcher(handler).fetch_collection("users")

    assert [d.id for d in docs] == ["u1", "u2", "u3"]
    assert docs[0].data == {"createdAt": datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)}
    assert docs[1].data == {"name": "Mona"}
    assert len(requests) == 2
    assert requests[0].url.path.endswith("/documents/users")
    assert requests[0].url.params["pageSize"] == "2"


async def test_empty_collection() -> None:
    docs = await _fetcher(lambda request: httpx.Response(200, json={})).fetch_collection("news")
    assert docs == []


async def test_fetch_nested_collection_path() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"documents": [_doc("services/health/items/h1")]})

    docs = await _fetcher(handler).fetch_nested_collection("services", "health", "items")
    assert [d.id for d in docs] == ["h1"]
    assert seen[0].endswith("/documents/services/health/items")


async def test_fetch_ordered_limited_runs_structured_query() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path.endswith("/documents:runQuery")
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json=[
                {"document": _doc("news/n2", title={"stringValue": "Second"}), "readTime": "x"},
                {"document": _doc("news/n1", title={"stringValue": "First"}), "readTime": "x"},
                {"readTime": "x"},
            ],
        )

    docs = await _fetcher(handler).fetch_ordered_limited("news", "createdAt", "DESCENDING", 10)

    assert [d.id for d in docs] == ["n2", "n1"]
    assert bodies[0] == {
        "structuredQuery": {
            "from": [{"collectionId": "news"}],
            "orderBy": [{"field": {"fieldPath": "createdAt"}, "direction": "DESCENDING"}],
            "limit": 10,
        }
    }


@pytest.mark.parametrize(
    ("selector", "expected_from"),
    [
        (CountSelector("properties"), {"collectionId": "properties"}),
        (CountSelector("items", all_descendants=True), {"collectionId": "items", "allDescendants": True}),
    ],
)
async def test_fetch_fast_count_uses_aggregation_query(selector, expected_from) -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/documents:runAggregationQuery")
        bodies.append(json.loads(request.content))
        return httpx.Response(
            200,
            json=[{"result": {"aggregateFields": {"count": {"integerValue": "42"}}}, "readTime": "x"}],
        )

    assert await _fetcher(handler).fetch_fast_count(selector) == 42
    query = bodies[0]["structuredAggregationQuery"]
    assert query["structuredQuery"]["from"] == [expected_from]
    assert query["aggregations"] == [{"alias": "count", "count": {}}]


async def test_http_error_becomes_fetch_failure() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(500, json={"error": {"code": 500}}))

    with pytest.raises(FetchFailure) as exc_info:
        await fetcher.fetch_collection("properties")

    assert exc_info.value.source == "properties"
    assert "HTTP 500" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)


async def test_transport_error_becomes_fetch_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(FetchFailure) as exc_info:
        await _fetcher(handler).fetch_fast_count(CountSelector("items", all_descendants=True))

    assert exc_info.value.source == "items/**"
    assert "timed out" in exc_info.value.message
