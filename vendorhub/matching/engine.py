from __future__ import annotations

import logging
import time

import pandas as pd

from ..analytics.store import record_event
from ..profiles.store import get_store
from .cache import cache_get, cache_set
from .eligibility import category_predicate, eligible_frame
from .models import MatchCriteria, MatchItem, MatchResponse
from .scoring import score_performance

logger = logging.getLogger(__name__)


def _score_row(row: pd.Series) -> float:
    return score_performance(row["average_rating"], row["completion_rate"], row["response_time"])


def _record_search(
    criteria: MatchCriteria,
    total_candidates: int,
    start_time: float,
    cache_hit: bool,
) -> None:
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("match", {
        "category": criteria.category.value,
        "date": criteria.date.isoformat(),
        "max_budget": criteria.max_budget,
        "location": criteria.location,
        "total_candidates": total_candidates,
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    })


def match_vendors(criteria: MatchCriteria) -> MatchResponse:
    start_time = time.time()
    store = get_store()

    # --- Cache check ---
    criteria_dict = criteria.model_dump(mode="json")
    revision = store.revision  # any profile write retires cached results
    cached = cache_get(criteria_dict, revision)
    if cached is not None:
        _record_search(criteria, cached.total_candidates, start_time, cache_hit=True)
        return cached.model_copy(deep=True)

    # --- Eligibility ---
    profiles = store.find_many(category_predicate(criteria))
    candidates = eligible_frame(profiles, criteria)

    if candidates.empty:
        logger.debug("No vendors matched %s", criteria_dict)
        response = MatchResponse(results=[], total_candidates=0)
        cache_set(criteria_dict, revision, response.model_copy(deep=True))
        _record_search(criteria, 0, start_time, cache_hit=False)
        return response

    # --- Scoring & ranking ---
    candidates["_score"] = candidates.apply(_score_row, axis=1)
    # stable: equal scores keep store order
    ranked = candidates.sort_values("_score", ascending=False, kind="stable")

    items = [
        MatchItem(profile=profiles[pos], score=round(float(score), 4))
        for pos, score in ranked["_score"].items()
    ]
    response = MatchResponse(results=items, total_candidates=len(items))
    cache_set(criteria_dict, revision, response.model_copy(deep=True))

    logger.info(
        "Matched %d vendors for %s on %s",
        len(items), criteria.category.value, criteria.date.isoformat(),
    )
    _record_search(criteria, len(items), start_time, cache_hit=False)
    return response
