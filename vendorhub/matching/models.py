from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..profiles.models import Category, VendorProfile, calendar_date


class MatchCriteria(BaseModel):
    category: Category
    date: dt.date
    max_budget: float
    location: str | None = Field(
        default=None, description="Accepted for the event record; not used as a filter"
    )

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time_of_day(cls, value: Any) -> dt.date:
        return calendar_date(value)


class MatchItem(BaseModel):
    profile: VendorProfile
    score: float


class MatchResponse(BaseModel):
    results: list[MatchItem]
    total_candidates: int
