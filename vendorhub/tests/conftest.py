from __future__ import annotations

from typing import Any

import pytest

from vendorhub.analytics.store import clear_events
from vendorhub.matching.cache import clear_cache
from vendorhub.profiles.models import VendorProfile
from vendorhub.profiles.store import get_store


@pytest.fixture(autouse=True)
def _fresh_state():
    get_store().clear()
    clear_cache()
    clear_events()
    yield


def _build_profile(
    vendor_id: str,
    categories: tuple[str, ...] = ("Photography",),
    prices: tuple[float, ...] = (500,),
    slots: tuple[tuple[str, str], ...] = (("2024-06-01", "available"),),
    performance: dict[str, Any] | None = None,
) -> VendorProfile:
    return VendorProfile.model_validate({
        "vendor_id": vendor_id,
        "business_name": f"{vendor_id} Studio",
        "description": "Event services",
        "categories": list(categories),
        "services": [{"name": f"Package {i}", "price": p} for i, p in enumerate(prices)],
        "availability": {"schedule": [{"date": d, "status": s} for d, s in slots]},
        "performance": performance or {},
    })


@pytest.fixture
def make_profile():
    return _build_profile
