from __future__ import annotations

from typing import Any

from ..profiles.models import number_or_zero

RATING_WEIGHT = 0.4
COMPLETION_WEIGHT = 0.3
RESPONSE_WEIGHT = 0.3


def score_performance(average_rating: Any, completion_rate: Any, response_time: Any) -> float:
    """
    Weighted desirability of a vendor's track record.

    Rating (0-5) and completion rate (0-100) are weighted on their raw
    scales, so completion rate dominates. Response time enters as
    ``1 / (minutes + 1)``, which stays within (0, 1]. Malformed inputs
    count as 0 and negative response times as 0.
    """
    rating = number_or_zero(average_rating)
    completion = number_or_zero(completion_rate)
    response = max(0.0, number_or_zero(response_time))
    return (
        rating * RATING_WEIGHT
        + completion * COMPLETION_WEIGHT
        + (1 / (response + 1)) * RESPONSE_WEIGHT
    )
