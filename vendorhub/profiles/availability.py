from __future__ import annotations

import datetime as dt
from typing import Any

from .models import Availability, AvailabilitySlot, SlotStatus, calendar_date


def find_slot(availability: Availability, day: Any) -> AvailabilitySlot | None:
    """Return the schedule entry for ``day``, or ``None`` when the date is open."""
    target = calendar_date(day)
    for slot in availability.schedule:
        if slot.date == target:
            return slot
    return None


def set_slot(
    availability: Availability,
    day: Any,
    status: SlotStatus,
    event_id: str | None = None,
) -> AvailabilitySlot:
    """Overwrite the entry for ``day`` in place, or append one if there is none."""
    slot = find_slot(availability, day)
    if slot is not None:
        slot.status = SlotStatus(status)
        if event_id is not None:
            slot.event_id = event_id
        return slot

    slot = AvailabilitySlot(date=calendar_date(day), status=status, event_id=event_id)
    availability.schedule.append(slot)
    return slot


def slots_in_range(availability: Availability, start: Any, end: Any) -> list[AvailabilitySlot]:
    """Entries dated within ``[start, end]``, in the order they were recorded."""
    first: dt.date = calendar_date(start)
    last: dt.date = calendar_date(end)
    return [slot for slot in availability.schedule if first <= slot.date <= last]
