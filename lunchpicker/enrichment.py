"""Per-candidate detail and walking-distance enrichment."""
from __future__ import annotations

import logging
import string

from .distance_client import DistanceClient
from .models import Candidate, Coordinate, RestaurantRecord
from .places_client import PlacesClient

logger = logging.getLogger(__name__)


def title_case_name(name: str) -> str:
    # Some listings come back all-caps; capwords keeps "Joe's" intact where
    # str.title() would give "Joe'S".
    return string.capwords(name.strip())


def enrich_candidate(
    candidate: Candidate,
    walk_origin: Coordinate,
    places_client: PlacesClient,
    distance_client: DistanceClient,
) -> RestaurantRecord:
    details = places_client.fetch_details(candidate.place_id)
    leg = distance_client.walking_leg(walk_origin, candidate.place_id)
    record = RestaurantRecord(
        name=title_case_name(details["name"]),
        rating=details.get("rating"),
        website=details.get("website"),
        distance_text=leg.distance_text,
        duration_text=leg.duration_text,
    )
    logger.info("Enriched %s: rating=%s walk=%s", record.name, record.rating, record.duration_text)
    return record
