"""Candidate filtering, random sampling and rating order."""
from __future__ import annotations

import random
from typing import AbstractSet, Iterable, List, Optional, Sequence, Set

from . import config
from .errors import ConfigurationError
from .models import Candidate, RestaurantRecord


def filter_candidates(candidates: Iterable[Candidate], blacklist: AbstractSet[str]) -> List[Candidate]:
    """Keep open, non-blacklisted candidates, first occurrence per name."""
    seen: Set[str] = set()
    kept: List[Candidate] = []
    for candidate in candidates:
        if not candidate.open_now:
            continue
        if candidate.name in blacklist:
            continue
        if candidate.name in seen:
            continue
        seen.add(candidate.name)
        kept.append(candidate)
    return kept


def validate_count(count: int) -> int:
    try:
        value = int(count)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"count must be an integer, got {count!r}") from exc
    if value < config.MIN_COUNT or value > config.MAX_COUNT:
        raise ConfigurationError(
            f"count must be between {config.MIN_COUNT} and {config.MAX_COUNT}, got {value}"
        )
    return value


def clamp_count(requested: int, available: int) -> int:
    """Reduce `requested` to what the pool can supply.

    Every available candidate stays eligible: a pool of 1 with a request of 5
    yields 1, never 0.
    """
    return max(0, min(int(requested), int(available)))


def sample_candidates(
    candidates: Sequence[Candidate],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[Candidate]:
    """Return `count` distinct candidates in uniformly random order.

    Fisher-Yates shuffle of a copy of the pool, then a prefix of the
    clamped length. The input is left untouched.
    """
    rng = rng or random.Random()
    pool = list(candidates)
    for i in range(len(pool) - 1, 0, -1):
        j = rng.randrange(i + 1)
        pool[i], pool[j] = pool[j], pool[i]
    return pool[: clamp_count(count, len(pool))]


def rating_sort_key(record: RestaurantRecord) -> tuple:
    # Missing ratings sort before every numeric rating.
    if record.rating is None:
        return (0, 0.0)
    return (1, float(record.rating))


def rank_records(records: Iterable[RestaurantRecord]) -> List[RestaurantRecord]:
    """Stable ascending sort by rating."""
    return sorted(records, key=rating_sort_key)
