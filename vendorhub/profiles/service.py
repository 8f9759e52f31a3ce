from __future__ import annotations

import datetime as dt
import logging

from ..errors import ProfileNotFound, ValidationFailed
from .availability import set_slot, slots_in_range
from .models import (
    Availability,
    AvailabilitySlot,
    MediaItem,
    Performance,
    Portfolio,
    PortfolioItemCreate,
    ProfileUpdate,
    SlotUpdate,
    VendorProfile,
    calendar_date,
    default_profile,
)
from .store import get_store

logger = logging.getLogger(__name__)


def _require_profile(vendor_id: str) -> VendorProfile:
    profile = get_store().find_one(vendor_id)
    if profile is None:
        raise ProfileNotFound(f"No profile for vendor {vendor_id}")
    return profile


def _parse_day(value: str | None, field: str) -> dt.date:
    if not value:
        raise ValidationFailed(f"{field} is required")
    try:
        return calendar_date(value)
    except ValueError as exc:
        raise ValidationFailed(f"{field}: {exc}") from exc


def get_profile(vendor_id: str) -> VendorProfile:
    """Return the vendor's profile, creating the default stub on first fetch."""
    return get_store().get_or_insert(vendor_id, lambda: default_profile(vendor_id))


def upsert_profile(vendor_id: str, update: ProfileUpdate) -> VendorProfile:
    """
    Replace the editable part of the profile, or create it.

    Blocks left out of ``update`` keep their stored value, or their default
    on creation. Performance, documents and the creation time belong to
    other subsystems and are always carried over.
    """
    existing = get_store().find_one(vendor_id)
    base = existing if existing is not None else VendorProfile(
        vendor_id=vendor_id,
        business_name=update.business_name,
        description=update.description,
        categories=update.categories,
    )
    profile = base.model_copy(update={
        "business_name": update.business_name,
        "description": update.description,
        "categories": update.categories,
    })
    for block in ("portfolio", "availability", "services", "location", "contact"):
        supplied = getattr(update, block)
        if supplied is not None:
            setattr(profile, block, supplied)
    logger.info("%s profile for vendor %s", "Updating" if existing else "Creating", vendor_id)
    return get_store().upsert(vendor_id, profile)


def get_availability_range(
    vendor_id: str, start_date: str | None, end_date: str | None,
) -> list[AvailabilitySlot]:
    start = _parse_day(start_date, "start_date")
    end = _parse_day(end_date, "end_date")
    profile = _require_profile(vendor_id)
    return slots_in_range(profile.availability, start, end)


def set_availability_slot(vendor_id: str, update: SlotUpdate) -> Availability:
    """Record one date's status; re-recording the same date overwrites it."""
    profile = get_store().update(
        vendor_id,
        lambda p: set_slot(p.availability, update.date, update.status, update.event_id),
    )
    logger.debug("Vendor %s slot %s -> %s", vendor_id, update.date, update.status.value)
    return profile.availability


def get_portfolio(vendor_id: str) -> Portfolio:
    return _require_profile(vendor_id).portfolio


def add_portfolio_item(vendor_id: str, item: PortfolioItemCreate) -> Portfolio:
    media = MediaItem(url=item.url, caption=item.caption, category=item.category)

    def _append(profile: VendorProfile) -> None:
        if item.type == "image":
            profile.portfolio.images.append(media)
        else:
            profile.portfolio.videos.append(media)

    return get_store().update(vendor_id, _append).portfolio


def get_performance(vendor_id: str) -> Performance:
    return _require_profile(vendor_id).performance
