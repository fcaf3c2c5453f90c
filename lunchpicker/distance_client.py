"""Distance Matrix API client and response parsing."""
from __future__ import annotations

from typing import Any, Dict

import requests

from . import config
from .errors import DistanceFetchFailure
from .http import HttpClient, provider_message, provider_status
from .models import Coordinate, WalkingLeg


class DistanceClient:
    def __init__(self, http_client: HttpClient, mode: str = config.DISTANCE_TRAVEL_MODE) -> None:
        self.http = http_client
        self.mode = mode

    def walking_leg(self, origin: Coordinate, place_id: str) -> WalkingLeg:
        params = build_distance_params(origin, place_id, self.mode)
        try:
            response = self.http.get_json(config.DISTANCE_MATRIX_URL, params, kind="distance")
        except (requests.RequestException, ValueError) as exc:
            raise DistanceFetchFailure(f"Distance request failed for {place_id}: {exc}") from exc
        return parse_distance_response(response, place_id)


def build_distance_params(origin: Coordinate, place_id: str, mode: str) -> Dict[str, Any]:
    return {
        "origins": origin.as_param(),
        "destinations": f"place_id:{place_id}",
        "mode": mode,
        "units": config.DISTANCE_UNITS,
    }


def parse_distance_response(response: Dict[str, Any], place_id: str = "") -> WalkingLeg:
    status = provider_status(response)
    if status != config.STATUS_OK:
        raise DistanceFetchFailure(
            f"Distance lookup failed for {place_id}",
            status=status or "UNKNOWN",
            provider_message=provider_message(response),
        )
    rows = response.get("rows") or []
    elements = (rows[0].get("elements") or []) if rows else []
    if not elements:
        raise DistanceFetchFailure(f"Distance lookup for {place_id} returned no elements", status=status)
    element = elements[0]
    element_status = str(element.get("status") or "")
    if element_status != config.STATUS_OK:
        raise DistanceFetchFailure(
            f"Distance lookup for {place_id} has no route",
            status=element_status or "UNKNOWN",
        )
    distance_text = (element.get("distance") or {}).get("text")
    duration_text = (element.get("duration") or {}).get("text")
    if not distance_text or not duration_text:
        raise DistanceFetchFailure(f"Distance lookup for {place_id} is missing distance or duration")
    return WalkingLeg(distance_text=str(distance_text), duration_text=str(duration_text))
