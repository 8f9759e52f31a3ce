from __future__ import annotations

import math
import datetime as dt
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class Category(str, Enum):
    catering = "Catering"
    photography = "Photography"
    decoration = "Decoration"
    music = "Music"
    makeup = "Makeup"
    venue = "Venue"
    other = "Other"


class SlotStatus(str, Enum):
    available = "available"
    booked = "booked"
    unavailable = "unavailable"


def calendar_date(value: Any) -> dt.date:
    """Reduce a date, datetime or ISO string to its calendar day."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValueError(f"Not a calendar date: {value!r}")


def number_or_zero(value: Any) -> float:
    """Read a performance figure, treating anything malformed as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


# ── Availability ledger ─────────────────────────────────────────────────


class AvailabilitySlot(BaseModel):
    date: dt.date
    status: SlotStatus = SlotStatus.available
    event_id: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time_of_day(cls, value: Any) -> dt.date:
        return calendar_date(value)


class WorkingHours(BaseModel):
    start: str = Field(default="09:00", pattern=r"^\d{2}:\d{2}$")
    end: str = Field(default="17:00", pattern=r"^\d{2}:\d{2}$")


class Availability(BaseModel):
    schedule: list[AvailabilitySlot] = Field(default_factory=list)
    working_hours: WorkingHours = Field(default_factory=WorkingHours)
    advance_booking_days: int = Field(default=30, ge=0)

    @field_validator("schedule")
    @classmethod
    def _one_slot_per_date(cls, schedule: list[AvailabilitySlot]) -> list[AvailabilitySlot]:
        seen: set[dt.date] = set()
        for slot in schedule:
            if slot.date in seen:
                raise ValueError(f"Duplicate schedule entry for {slot.date.isoformat()}")
            seen.add(slot.date)
        return schedule


# ── Offer and track record ──────────────────────────────────────────────


class Service(BaseModel):
    name: str = ""
    description: str | None = None
    price: float = Field(..., ge=0)
    duration: str | None = None
    category: str | None = None


class Performance(BaseModel):
    total_events: int = 0
    average_rating: float = 0.0
    response_time: float = 0.0  # minutes
    completion_rate: float = 0.0  # percent
    revenue: float = 0.0

    @field_validator("average_rating", "response_time", "completion_rate", "revenue", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        return number_or_zero(value)

    @field_validator("total_events", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return int(number_or_zero(value))


# ── Display-only blocks ─────────────────────────────────────────────────


class MediaItem(BaseModel):
    url: str
    caption: str | None = None
    category: str | None = None


class Testimonial(BaseModel):
    client_name: str | None = None
    event_type: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    review: str | None = None
    date: dt.datetime | None = None


class Portfolio(BaseModel):
    images: list[MediaItem] = Field(default_factory=list)
    videos: list[MediaItem] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)


class Coordinates(BaseModel):
    latitude: float | None = None
    longitude: float | None = None


class Location(BaseModel):
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    coordinates: Coordinates = Field(default_factory=Coordinates)


class SocialMedia(BaseModel):
    facebook: str | None = None
    instagram: str | None = None
    twitter: str | None = None


class Contact(BaseModel):
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    social_media: SocialMedia = Field(default_factory=SocialMedia)


class VendorDocument(BaseModel):
    type: str | None = None
    name: str | None = None
    verified: bool = False


# ── Aggregate ───────────────────────────────────────────────────────────


class VendorProfile(BaseModel):
    vendor_id: str = Field(..., min_length=1)
    business_name: str
    description: str
    categories: list[Category] = Field(..., min_length=1)
    portfolio: Portfolio = Field(default_factory=Portfolio)
    availability: Availability = Field(default_factory=Availability)
    services: list[Service] = Field(default_factory=list)
    performance: Performance = Field(default_factory=Performance)
    location: Location = Field(default_factory=Location)
    contact: Contact = Field(default_factory=Contact)
    documents: list[VendorDocument] = Field(default_factory=list)
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)

    def touch(self) -> None:
        self.updated_at = _utcnow()


def default_profile(vendor_id: str) -> VendorProfile:
    """Stub profile handed to a vendor on their first profile fetch."""
    return VendorProfile(
        vendor_id=vendor_id,
        business_name="My Business",
        description="Welcome to my vendor profile!",
        categories=[Category.other],
    )


# ── Request bodies ──────────────────────────────────────────────────────


class ProfileUpdate(BaseModel):
    business_name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    categories: list[Category] = Field(..., min_length=1)
    portfolio: Portfolio | None = None
    availability: Availability | None = None
    services: list[Service] | None = None
    location: Location | None = None
    contact: Contact | None = None

    @field_validator("business_name", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class SlotUpdate(BaseModel):
    date: dt.date
    status: SlotStatus
    event_id: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time_of_day(cls, value: Any) -> dt.date:
        return calendar_date(value)


class PortfolioItemCreate(BaseModel):
    type: Literal["image", "video"]
    url: str = Field(..., min_length=1)
    caption: str | None = None
    category: str | None = None
