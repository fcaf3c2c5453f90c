"""Places API client: paginated nearby search, place details and response parsing."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from . import config
from .errors import DetailFetchFailure, PaginationFailure
from .http import HttpClient, provider_message, provider_status
from .models import Candidate, Coordinate, parse_decimal

logger = logging.getLogger(__name__)


class PlacesClient:
    def __init__(
        self,
        http_client: HttpClient,
        sleep: Callable[[float], None] = time.sleep,
        page_delay_seconds: float = config.NEARBY_PAGE_TOKEN_DELAY_SECONDS,
        max_pages: int = config.NEARBY_MAX_PAGES,
    ) -> None:
        self.http = http_client
        self.sleep = sleep
        self.page_delay_seconds = page_delay_seconds
        self.max_pages = max_pages

    def search_nearby(
        self,
        origin: Coordinate,
        page_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = build_nearby_search_params(origin, page_token)
        try:
            response = self.http.get_json(config.PLACES_NEARBY_SEARCH_URL, params, kind="nearby")
        except (requests.RequestException, ValueError) as exc:
            raise PaginationFailure(f"Nearby search request failed: {exc}") from exc
        status = provider_status(response)
        if status not in (config.STATUS_OK, config.STATUS_ZERO_RESULTS):
            raise PaginationFailure(
                "Nearby search failed",
                status=status or "UNKNOWN",
                provider_message=provider_message(response),
            )
        return response

    def fetch_candidates(self, origin: Coordinate) -> List[Candidate]:
        """Fetch every nearby page around `origin`, concatenated in arrival order.

        A continuation token only becomes valid some seconds after it is issued,
        so the pager always waits `page_delay_seconds` before using one. Any
        failing page aborts the whole fetch.
        """
        candidates: List[Candidate] = []
        page_token: Optional[str] = None
        for page in range(1, self.max_pages + 1):
            if page_token:
                logger.info("Waiting %.1fs before nearby page %s", self.page_delay_seconds, page)
                self.sleep(self.page_delay_seconds)
            resp = self.search_nearby(origin, page_token=page_token)
            parsed = parse_nearby_response(resp)
            logger.info("Nearby page %s: %s places", page, len(parsed))
            candidates.extend(parsed)
            page_token = resp.get("next_page_token")
            if not page_token:
                break
        return candidates

    def fetch_details(self, place_id: str) -> Dict[str, Any]:
        """Return the raw detail record (name, rating, website) for `place_id`."""
        params = build_details_params(place_id)
        try:
            response = self.http.get_json(config.PLACES_DETAILS_URL, params, kind="details")
        except (requests.RequestException, ValueError) as exc:
            raise DetailFetchFailure(f"Place details request failed for {place_id}: {exc}") from exc
        return parse_details_response(response, place_id)


def build_nearby_search_params(origin: Coordinate, page_token: Optional[str]) -> Dict[str, Any]:
    # The provider rejects a token request that repeats the original query.
    if page_token:
        return {"pagetoken": page_token}
    return {
        "location": origin.as_param(),
        "rankby": config.NEARBY_RANK_BY,
        "type": config.NEARBY_PLACE_TYPE,
    }


def build_details_params(place_id: str) -> Dict[str, Any]:
    return {"place_id": place_id, "fields": config.PLACES_DETAILS_FIELDS}


# Adapter/mapper for Places response fields

def parse_nearby_response(response: Dict[str, Any]) -> List[Candidate]:
    results = response.get("results") or []
    parsed: List[Candidate] = []
    for p in results:
        place_id = p.get("place_id")
        name = p.get("name")
        if not place_id or not name:
            continue
        opening_hours = p.get("opening_hours") or {}
        parsed.append(
            Candidate(
                name=str(name),
                place_id=str(place_id),
                open_now=opening_hours.get("open_now") is True,
            )
        )
    return parsed


def parse_details_response(response: Dict[str, Any], place_id: str = "") -> Dict[str, Any]:
    status = provider_status(response)
    if status != config.STATUS_OK:
        raise DetailFetchFailure(
            f"Place details failed for {place_id}",
            status=status or "UNKNOWN",
            provider_message=provider_message(response),
        )
    result = response.get("result")
    # A place listed together with an attached venue can come back as several
    # records; the first one wins.
    if isinstance(result, list):
        result = result[0] if result else None
    if not isinstance(result, dict) or not result.get("name"):
        raise DetailFetchFailure(f"Place details for {place_id} have no name", status=status)

    rating = result.get("rating")
    if rating is not None:
        try:
            rating = parse_decimal(rating)
        except ValueError as exc:
            raise DetailFetchFailure(f"Place details for {place_id} have a malformed rating: {exc}") from exc
    website = str(result.get("website") or "").strip() or None
    return {
        "name": str(result["name"]),
        "rating": rating,
        "website": website,
    }
