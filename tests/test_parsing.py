import pytest

from lunchpicker.distance_client import parse_distance_response
from lunchpicker.errors import DetailFetchFailure, DistanceFetchFailure, GeocodingFailure
from lunchpicker.geocoding import parse_geocode_response
from lunchpicker.models import Candidate, Coordinate, WalkingLeg
from lunchpicker.places_client import parse_details_response, parse_nearby_response


def test_parse_geocode_takes_first_result():
    response = {
        "status": "OK",
        "results": [
            {"geometry": {"location": {"lat": 59.31, "lng": 18.07}}},
            {"geometry": {"location": {"lat": 1.0, "lng": 2.0}}},
        ],
    }
    assert parse_geocode_response(response, "Origin X") == Coordinate(59.31, 18.07)


def test_parse_geocode_normalizes_comma_decimals():
    response = {"status": "OK", "results": [{"geometry": {"location": {"lat": "59,31", "lng": "18,07"}}}]}
    coordinate = parse_geocode_response(response)
    assert coordinate == Coordinate(59.31, 18.07)
    assert coordinate.as_param() == "59.31,18.07"


@pytest.mark.parametrize(
    "coordinate, expected",
    [
        (Coordinate(0.00005, 18.07), "0.00005,18.07"),
        (Coordinate(-0.00001, -0.00002), "-0.00001,-0.00002"),
        (Coordinate(1e-10, 0.0), "0.0,0.0"),
        (Coordinate(-33.8688, 151.2093), "-33.8688,151.2093"),
    ],
)
def test_coordinate_param_near_zero_is_fixed_point(coordinate, expected):
    assert coordinate.as_param() == expected
    assert "e" not in coordinate.as_param()


@pytest.mark.parametrize(
    "response",
    [
        {"status": "ZERO_RESULTS", "results": []},
        {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."},
        {"status": "OK", "results": [{"geometry": {}}]},
    ],
)
def test_parse_geocode_failures(response):
    with pytest.raises(GeocodingFailure):
        parse_geocode_response(response, "Nowhere")


def test_geocode_failure_carries_provider_message():
    with pytest.raises(GeocodingFailure) as excinfo:
        parse_geocode_response({"status": "REQUEST_DENIED", "error_message": "bad key"}, "X")
    assert excinfo.value.status == "REQUEST_DENIED"
    assert excinfo.value.provider_message == "bad key"
    assert "bad key" in str(excinfo.value)


def test_parse_nearby_missing_fields():
    response = {
        "status": "OK",
        "results": [
            {"place_id": "p1", "name": "Open One", "opening_hours": {"open_now": True}},
            {"place_id": "p2", "name": "Closed One", "opening_hours": {"open_now": False}},
            {"place_id": "p3", "name": "No Hours"},
            {"name": "No Id", "opening_hours": {"open_now": True}},
            {"place_id": "p5", "opening_hours": {"open_now": True}},
        ],
    }
    assert parse_nearby_response(response) == [
        Candidate("Open One", "p1", open_now=True),
        Candidate("Closed One", "p2", open_now=False),
        Candidate("No Hours", "p3", open_now=False),
    ]


def test_parse_details_fields():
    response = {
        "status": "OK",
        "result": {"name": "PIZZA PLACE", "rating": 4.3, "website": "https://pizza.example"},
    }
    assert parse_details_response(response, "p1") == {
        "name": "PIZZA PLACE",
        "rating": 4.3,
        "website": "https://pizza.example",
    }


def test_parse_details_missing_rating_and_website():
    details = parse_details_response({"status": "OK", "result": {"name": "Quiet Cafe"}}, "p1")
    assert details["rating"] is None
    assert details["website"] is None


def test_parse_details_uses_first_of_several_records():
    response = {
        "status": "OK",
        "result": [
            {"name": "Bistro", "rating": 4.1},
            {"name": "Bistro Bar", "rating": 3.2},
        ],
    }
    assert parse_details_response(response, "p1")["name"] == "Bistro"


@pytest.mark.parametrize(
    "response",
    [
        {"status": "NOT_FOUND"},
        {"status": "OK", "result": {}},
        {"status": "OK", "result": []},
        {"status": "OK", "result": {"name": "X", "rating": "great"}},
    ],
)
def test_parse_details_failures(response):
    with pytest.raises(DetailFetchFailure):
        parse_details_response(response, "p1")


def test_parse_distance_first_element():
    response = {
        "status": "OK",
        "rows": [
            {
                "elements": [
                    {"status": "OK", "distance": {"text": "0.4 km"}, "duration": {"text": "6 mins"}},
                ]
            }
        ],
    }
    assert parse_distance_response(response, "p1") == WalkingLeg("0.4 km", "6 mins")


@pytest.mark.parametrize(
    "response",
    [
        {"status": "OVER_QUERY_LIMIT"},
        {"status": "OK", "rows": []},
        {"status": "OK", "rows": [{"elements": [{"status": "ZERO_RESULTS"}]}]},
        {"status": "OK", "rows": [{"elements": [{"status": "OK", "distance": {"text": "1 km"}}]}]},
    ],
)
def test_parse_distance_failures(response):
    with pytest.raises(DistanceFetchFailure):
        parse_distance_response(response, "p1")
