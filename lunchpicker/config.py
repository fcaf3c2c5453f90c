"""Project configuration.

Loads user-defined lunch parameters from lunch_config.json when available,
falling back to sensible defaults. Keep API request shapes centralized here.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from .errors import ConfigurationError

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- API endpoints ---

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
PLACES_NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
PLACES_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"

API_KEY_ENV = "GOOGLE_MAPS_API_KEY"

# --- Request shapes ---

PLACES_DETAILS_FIELDS = "name,rating,website"
NEARBY_PLACE_TYPE = "restaurant"
NEARBY_RANK_BY = "distance"
DISTANCE_TRAVEL_MODE = "walking"
DISTANCE_UNITS = "metric"

# Provider statuses
STATUS_OK = "OK"
STATUS_ZERO_RESULTS = "ZERO_RESULTS"

# --- Nearby pagination ---

# A next_page_token is rejected by the provider until it has been live for a
# short while; the wait is mandatory, not a backoff.
NEARBY_PAGE_TOKEN_DELAY_SECONDS = 5.0
NEARBY_MAX_PAGES = 3

# --- Selection ---

MIN_COUNT = 1
MAX_COUNT = 30

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 20

# --- Outputs ---

OUTPUT_DIR = "out"

# --- Defaults (used when no lunch_config.json) ---

_DEFAULT_COUNT = 1

# --- Mutable config (populated by load_lunch_config or directly) ---

DEFAULT_COUNT: int = _DEFAULT_COUNT
SEARCH_ORIGIN: Optional[str] = None
WALK_ORIGIN: Optional[str] = None
BLACKLIST_NAMES: Optional[List[str]] = None
BLACKLIST_PATH: Optional[str] = None


def load_lunch_config(path: Optional[str] = None) -> bool:
    """Load lunch configuration from a JSON file.

    Updates module-level globals with values from the config file.
    Returns True if config was loaded, False if file not found.
    Raises ConfigurationError for malformed JSON or values of the wrong type;
    no global is changed in that case.
    """
    if path is None:
        path = str(_REPO_ROOT / "lunch_config.json")

    config_path = Path(path)
    if not config_path.exists():
        return False

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid JSON in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must hold a JSON object")

    updates = {}

    count = data.get("count")
    if count is not None:
        if isinstance(count, bool):
            raise ConfigurationError(f"count must be an integer, got {count!r}")
        try:
            updates["DEFAULT_COUNT"] = int(count)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"count must be an integer, got {count!r}") from exc

    origin = data.get("search_origin")
    if origin:
        updates["SEARCH_ORIGIN"] = str(origin)

    walk_origin = data.get("walk_origin")
    if walk_origin:
        updates["WALK_ORIGIN"] = str(walk_origin)

    blacklist = data.get("blacklist")
    if blacklist is not None:
        if not isinstance(blacklist, list):
            raise ConfigurationError(f"blacklist must be a list of names, got {blacklist!r}")
        updates["BLACKLIST_NAMES"] = [str(name) for name in blacklist]

    blacklist_path = data.get("blacklist_path")
    if blacklist_path:
        resolved = Path(blacklist_path)
        if not resolved.is_absolute():
            resolved = config_path.resolve().parent / resolved
        updates["BLACKLIST_PATH"] = str(resolved)

    globals().update(updates)
    return True
