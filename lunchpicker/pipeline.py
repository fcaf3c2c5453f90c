"""Pipeline orchestration."""
from __future__ import annotations

import logging
import os
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

import requests

from . import config
from .blacklist import resolve_blacklist
from .distance_client import DistanceClient
from .enrichment import enrich_candidate
from .errors import ConfigurationError
from .geocoding import GeocodingClient
from .http import HttpClient, RequestMetrics
from .models import RestaurantRecord
from .places_client import PlacesClient
from .reporting import (
    ensure_dir,
    render_results,
    write_results_csv,
    write_results_json,
    write_summary,
)
from .selection import clamp_count, filter_candidates, rank_records, sample_candidates, validate_count

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    records: List[RestaurantRecord]
    summary: Dict[str, Any]


def run(
    api_key: Optional[str],
    search_origin: str,
    walk_origin: Optional[str] = None,
    count: Optional[int] = None,
    blacklist: Optional[Iterable[str]] = None,
    blacklist_path: Optional[str] = None,
    output_dir: str = config.OUTPUT_DIR,
    write_outputs: bool = False,
    geocoder: Optional[GeocodingClient] = None,
    places_client: Optional[PlacesClient] = None,
    distance_client: Optional[DistanceClient] = None,
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], None] = time.sleep,
    metrics: Optional[RequestMetrics] = None,
    session: Optional[requests.Session] = None,
) -> PipelineResult:
    """Pick `count` random open restaurants near `search_origin`, ranked by rating.

    All inputs are validated before the first provider call. Any provider
    failure propagates as a ProviderError subclass and nothing is returned.
    """
    if not (api_key or "").strip():
        raise ConfigurationError(f"API key is required (set {config.API_KEY_ENV})")
    requested = validate_count(config.DEFAULT_COUNT if count is None else count)
    search_origin = (search_origin or "").strip()
    if not search_origin:
        raise ConfigurationError("A search origin address is required")
    walk_origin = (walk_origin or "").strip() or search_origin
    names_blacklist = resolve_blacklist(blacklist, blacklist_path)

    if metrics is None:
        metrics = RequestMetrics()

    if write_outputs:
        ensure_dir(output_dir)

    if geocoder is None or places_client is None or distance_client is None:
        http_client = HttpClient(
            api_key,
            timeout=config.HTTP_TIMEOUT_SECONDS,
            metrics=metrics,
            session=session,
        )
        if geocoder is None:
            geocoder = GeocodingClient(http_client)
        if places_client is None:
            places_client = PlacesClient(http_client, sleep=sleep)
        if distance_client is None:
            distance_client = DistanceClient(http_client)

    logger.info("Stage 1: geocode")
    search_coordinate = geocoder.geocode(search_origin)
    if walk_origin == search_origin:
        walk_coordinate = search_coordinate
    else:
        walk_coordinate = geocoder.geocode(walk_origin)

    logger.info("Stage 2: nearby search")
    candidates = places_client.fetch_candidates(search_coordinate)

    logger.info("Stage 3: filters")
    eligible = filter_candidates(candidates, names_blacklist)
    open_count = sum(1 for c in candidates if c.open_now)
    logger.info(
        "Candidates: fetched=%s open=%s eligible=%s", len(candidates), open_count, len(eligible)
    )

    logger.info("Stage 4: sampling")
    effective = clamp_count(requested, len(eligible))
    if effective < requested:
        logger.warning("Only %s eligible restaurants for %s requested", effective, requested)
    sampled = sample_candidates(eligible, effective, rng=rng)

    logger.info("Stage 5: enrichment")
    enriched = [
        enrich_candidate(candidate, walk_coordinate, places_client, distance_client)
        for candidate in sampled
    ]
    unique = dedupe_records(enriched)

    logger.info("Stage 6: ranking")
    ranked = rank_records(unique)

    summary: Dict[str, Any] = {
        "search_origin": search_origin,
        "walk_origin": walk_origin,
        "requested_count": requested,
        "fetched_count": len(candidates),
        "open_count": open_count,
        "eligible_count": len(eligible),
        "sampled_count": len(sampled),
        "dropped_duplicates": len(enriched) - len(unique),
        "returned_count": len(ranked),
        "blacklist_size": len(names_blacklist),
        "requests": metrics.as_dict(),
    }

    if write_outputs:
        logger.info("Stage 7: outputs")
        write_results_json(os.path.join(output_dir, "results.json"), ranked)
        write_results_csv(os.path.join(output_dir, "results.csv"), ranked)
        write_summary(
            os.path.join(output_dir, "summary.txt"),
            render_summary(summary) + render_results(ranked),
        )

    return PipelineResult(records=ranked, summary=summary)


def dedupe_records(records: Iterable[RestaurantRecord]) -> List[RestaurantRecord]:
    """Drop records whose normalized name repeats an earlier one."""
    seen: Set[str] = set()
    unique: List[RestaurantRecord] = []
    for record in records:
        if record.name in seen:
            logger.warning("Dropping duplicate restaurant name after enrichment: %s", record.name)
            continue
        seen.add(record.name)
        unique.append(record)
    return unique


def render_summary(summary: Dict[str, Any]) -> List[str]:
    lines = []
    lines.append(f"Search origin: {summary.get('search_origin', '')}")
    if summary.get("walk_origin") and summary.get("walk_origin") != summary.get("search_origin"):
        lines.append(f"Walk origin: {summary['walk_origin']}")
    lines.append(
        "Candidates: fetched={fetched}, open={open_}, eligible={eligible}".format(
            fetched=summary.get("fetched_count", 0),
            open_=summary.get("open_count", 0),
            eligible=summary.get("eligible_count", 0),
        )
    )
    lines.append(
        "Selection: requested={requested}, returned={returned}, dropped_duplicates={dropped}".format(
            requested=summary.get("requested_count", 0),
            returned=summary.get("returned_count", 0),
            dropped=summary.get("dropped_duplicates", 0),
        )
    )
    requests_by_kind = summary.get("requests", {})
    lines.append(
        "Requests (network): geocode={geocode}, nearby={nearby}, details={details}, distance={distance}".format(
            geocode=requests_by_kind.get("geocode", 0),
            nearby=requests_by_kind.get("nearby", 0),
            details=requests_by_kind.get("details", 0),
            distance=requests_by_kind.get("distance", 0),
        )
    )
    return lines
