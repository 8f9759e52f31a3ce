from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pandas as pd

from ..profiles.models import SlotStatus, VendorProfile
from .models import MatchCriteria

CANDIDATE_COLUMNS = [
    "vendor_id",
    "categories",
    "open_dates",
    "min_price",
    "average_rating",
    "completion_rate",
    "response_time",
]


def category_predicate(criteria: MatchCriteria) -> Callable[[VendorProfile], bool]:
    """Store-side narrowing by category, the cheapest of the three conditions."""
    return lambda profile: criteria.category in profile.categories


def build_candidate_frame(profiles: list[VendorProfile]) -> pd.DataFrame:
    """One row per profile, in the order given; row label = list position."""
    rows = []
    for profile in profiles:
        prices = [s.price for s in profile.services]
        rows.append({
            "vendor_id": profile.vendor_id,
            "categories": {c.value for c in profile.categories},
            "open_dates": {
                s.date for s in profile.availability.schedule
                if s.status == SlotStatus.available
            },
            # any affordable service qualifies, so the cheapest one decides
            "min_price": min(prices) if prices else np.nan,
            "average_rating": profile.performance.average_rating,
            "completion_rate": profile.performance.completion_rate,
            "response_time": profile.performance.response_time,
        })
    return pd.DataFrame(rows, columns=CANDIDATE_COLUMNS)


def eligibility_mask(frame: pd.DataFrame, criteria: MatchCriteria) -> pd.Series:
    """Boolean mask: in category AND open on the date AND some service within budget."""
    if frame.empty:
        return pd.Series(False, index=frame.index, dtype=bool)

    category = criteria.category.value
    day = criteria.date

    mask = frame["categories"].apply(lambda cats: category in cats).astype(bool)
    mask = mask & frame["open_dates"].apply(lambda days: day in days).astype(bool)
    # NaN (no services) never compares true
    mask = mask & (frame["min_price"].astype(float) <= criteria.max_budget)
    # location is accepted but deliberately not filtered on
    return mask


def eligible_frame(profiles: list[VendorProfile], criteria: MatchCriteria) -> pd.DataFrame:
    """Candidate rows of the eligible profiles; row label = position in ``profiles``."""
    frame = build_candidate_frame(profiles)
    return frame.loc[eligibility_mask(frame, criteria)].copy()


def filter_eligible(profiles: list[VendorProfile], criteria: MatchCriteria) -> list[VendorProfile]:
    """Eligible profiles, in the order given."""
    return [profiles[pos] for pos in eligible_frame(profiles, criteria).index]
