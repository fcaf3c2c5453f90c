import pytest
import requests

from lunchpicker import config
from lunchpicker.errors import DetailFetchFailure, PaginationFailure
from lunchpicker.http import HttpClient, RequestMetrics
from lunchpicker.models import Coordinate
from lunchpicker.places_client import PlacesClient, build_nearby_search_params

ORIGIN = Coordinate(59.31, 18.07)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.headers = {}

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


class RecordingSession:
    """Replays canned responses and records every request and sleep in order."""

    def __init__(self, responses, events):
        self.responses = list(responses)
        self.events = events

    def get(self, url, params=None, timeout=None):
        self.events.append(("get", url, dict(params or {})))
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def _page(names, token=None, status="OK"):
    payload = {
        "status": status,
        "results": [
            {"place_id": f"id-{n}", "name": n, "opening_hours": {"open_now": True}} for n in names
        ],
    }
    if token:
        payload["next_page_token"] = token
    return FakeResponse(payload)


def make_places_client(responses, metrics=None):
    events = []
    http_client = HttpClient(
        api_key="dummy",
        metrics=metrics,
        session=RecordingSession(responses, events),
    )
    client = PlacesClient(http_client, sleep=lambda seconds: events.append(("sleep", seconds)))
    return client, events


def test_three_pages_with_mandatory_delay():
    metrics = RequestMetrics()
    client, events = make_places_client(
        [
            _page(["A", "B"], token="tok-1"),
            _page(["C", "D"], token="tok-2"),
            _page(["E"]),
        ],
        metrics=metrics,
    )

    candidates = client.fetch_candidates(ORIGIN)

    assert [c.name for c in candidates] == ["A", "B", "C", "D", "E"]
    assert [e[0] for e in events] == ["get", "sleep", "get", "sleep", "get"]
    sleeps = [e[1] for e in events if e[0] == "sleep"]
    assert all(seconds >= 5.0 for seconds in sleeps)
    assert metrics.network_nearby == 3

    first_params = events[0][2]
    assert first_params["location"] == "59.31,18.07"
    assert first_params["rankby"] == "distance"
    assert "radius" not in first_params
    assert events[2][2] == {"pagetoken": "tok-1", "key": "dummy"}
    assert events[4][2] == {"pagetoken": "tok-2", "key": "dummy"}


def test_single_page_without_token_does_not_wait():
    client, events = make_places_client([_page(["A", "B", "C"])])

    candidates = client.fetch_candidates(ORIGIN)

    assert len(candidates) == 3
    assert [e[0] for e in events] == ["get"]


def test_page_cap_stops_even_if_token_returned():
    client, events = make_places_client(
        [_page(["A"], token="t1"), _page(["B"], token="t2"), _page(["C"], token="t3")]
    )

    candidates = client.fetch_candidates(ORIGIN)

    assert [c.name for c in candidates] == ["A", "B", "C"]
    assert sum(1 for e in events if e[0] == "get") == config.NEARBY_MAX_PAGES


def test_failure_on_second_page_aborts_fetch():
    client, events = make_places_client(
        [
            _page(["A", "B"], token="tok-1"),
            FakeResponse({"status": "INVALID_REQUEST"}),
        ]
    )

    with pytest.raises(PaginationFailure) as excinfo:
        client.fetch_candidates(ORIGIN)

    assert excinfo.value.status == "INVALID_REQUEST"
    assert [e[0] for e in events] == ["get", "sleep", "get"]


def test_transport_error_becomes_pagination_failure():
    client, _ = make_places_client([requests.ConnectionError("boom")])

    with pytest.raises(PaginationFailure):
        client.fetch_candidates(ORIGIN)


def test_zero_results_is_an_empty_page():
    client, _ = make_places_client([_page([], status="ZERO_RESULTS")])

    assert client.fetch_candidates(ORIGIN) == []


def test_token_request_does_not_repeat_query():
    assert build_nearby_search_params(ORIGIN, "tok") == {"pagetoken": "tok"}


def test_fetch_details_requests_exact_fields():
    payload = {"status": "OK", "result": {"name": "CAFE", "rating": 4.0}}
    client, events = make_places_client([FakeResponse(payload)])

    details = client.fetch_details("p1")

    assert details["name"] == "CAFE"
    assert events[0][1] == config.PLACES_DETAILS_URL
    assert events[0][2]["fields"] == "name,rating,website"
    assert events[0][2]["place_id"] == "p1"


def test_fetch_details_http_error_becomes_detail_failure():
    client, _ = make_places_client([FakeResponse({}, status_code=500)])

    with pytest.raises(DetailFetchFailure):
        client.fetch_details("p1")
