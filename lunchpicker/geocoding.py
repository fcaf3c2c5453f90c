"""Geocoding API client and response parsing."""
from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from . import config
from .errors import GeocodingFailure
from .http import HttpClient, provider_message, provider_status
from .models import Coordinate

logger = logging.getLogger(__name__)


class GeocodingClient:
    def __init__(self, http_client: HttpClient) -> None:
        self.http = http_client

    def geocode(self, address: str) -> Coordinate:
        address = (address or "").strip()
        if not address:
            raise GeocodingFailure("Cannot geocode an empty address")
        try:
            response = self.http.get_json(config.GEOCODE_URL, {"address": address}, kind="geocode")
        except (requests.RequestException, ValueError) as exc:
            raise GeocodingFailure(f"Geocoding request failed for {address!r}: {exc}") from exc
        coordinate = parse_geocode_response(response, address)
        logger.info("Geocoded %r to %s", address, coordinate.as_param())
        return coordinate


def parse_geocode_response(response: Dict[str, Any], address: str = "") -> Coordinate:
    status = provider_status(response)
    if status != config.STATUS_OK:
        raise GeocodingFailure(
            f"Geocoding failed for {address!r}",
            status=status or "UNKNOWN",
            provider_message=provider_message(response),
        )
    results = response.get("results") or []
    if not results:
        raise GeocodingFailure(f"Geocoding returned no results for {address!r}", status=status)
    location = (results[0].get("geometry") or {}).get("location") or {}
    lat = location.get("lat")
    lng = location.get("lng")
    if lat is None or lng is None:
        raise GeocodingFailure(f"Geocoding result for {address!r} has no location")
    try:
        return Coordinate.parse(lat, lng)
    except ValueError as exc:
        raise GeocodingFailure(f"Geocoding result for {address!r} has a malformed location: {exc}") from exc
