from __future__ import annotations

from vendorhub.matching.eligibility import build_candidate_frame, filter_eligible
from vendorhub.matching.models import MatchCriteria

CRITERIA = MatchCriteria(category="Photography", date="2024-06-01", max_budget=600)


def _ids(profiles):
    return [p.vendor_id for p in profiles]


def test_vendor_meeting_every_condition_is_eligible(make_profile):
    assert _ids(filter_eligible([make_profile("v-1")], CRITERIA)) == ["v-1"]


# ── Each condition alone excludes ───────────────────────────────────────


def test_wrong_category_excluded(make_profile):
    vendor = make_profile("v-1", categories=("Catering", "Music"))
    assert filter_eligible([vendor], CRITERIA) == []


def test_booked_slot_excluded(make_profile):
    vendor = make_profile("v-1", slots=(("2024-06-01", "booked"),))
    assert filter_eligible([vendor], CRITERIA) == []


def test_unavailable_slot_excluded(make_profile):
    vendor = make_profile("v-1", slots=(("2024-06-01", "unavailable"),))
    assert filter_eligible([vendor], CRITERIA) == []


def test_open_date_without_entry_is_not_available(make_profile):
    vendor = make_profile("v-1", slots=(("2024-06-02", "available"),))
    assert filter_eligible([vendor], CRITERIA) == []


def test_empty_schedule_excluded(make_profile):
    vendor = make_profile("v-1", slots=())
    assert filter_eligible([vendor], CRITERIA) == []


def test_all_services_over_budget_excluded(make_profile):
    vendor = make_profile("v-1", prices=(650, 900))
    assert filter_eligible([vendor], CRITERIA) == []


def test_no_services_excluded(make_profile):
    vendor = make_profile("v-1", prices=())
    assert filter_eligible([vendor], CRITERIA) == []


# ── Boundaries and loose ends ───────────────────────────────────────────


def test_price_equal_to_budget_is_affordable(make_profile):
    vendor = make_profile("v-1", prices=(600,))
    assert _ids(filter_eligible([vendor], CRITERIA)) == ["v-1"]


def test_any_affordable_service_qualifies(make_profile):
    vendor = make_profile("v-1", prices=(2000, 150, 900))
    assert _ids(filter_eligible([vendor], CRITERIA)) == ["v-1"]


def test_affordable_service_need_not_be_in_requested_category(make_profile):
    vendor = make_profile("v-1", categories=("Photography", "Catering"))
    vendor.services[0].category = "Catering"
    assert _ids(filter_eligible([vendor], CRITERIA)) == ["v-1"]


def test_criteria_time_of_day_is_ignored(make_profile):
    late = MatchCriteria(category="Photography", date="2024-06-01T22:45:00", max_budget=600)
    assert _ids(filter_eligible([make_profile("v-1")], late)) == ["v-1"]


def test_location_is_not_a_filter(make_profile):
    elsewhere = CRITERIA.model_copy(update={"location": "Somewhere far away"})
    assert _ids(filter_eligible([make_profile("v-1")], elsewhere)) == ["v-1"]


def test_other_days_do_not_interfere(make_profile):
    vendor = make_profile(
        "v-1",
        slots=(("2024-05-31", "booked"), ("2024-06-01", "available"), ("2024-06-02", "booked")),
    )
    assert _ids(filter_eligible([vendor], CRITERIA)) == ["v-1"]


def test_order_is_preserved(make_profile):
    vendors = [
        make_profile("v-3"),
        make_profile("v-skip", categories=("Venue",)),
        make_profile("v-1"),
        make_profile("v-2"),
    ]
    assert _ids(filter_eligible(vendors, CRITERIA)) == ["v-3", "v-1", "v-2"]


def test_empty_input_gives_empty_result():
    assert filter_eligible([], CRITERIA) == []


def test_candidate_frame_rows_follow_input(make_profile):
    frame = build_candidate_frame([make_profile("v-1", prices=(300, 120)), make_profile("v-2", prices=())])
    assert frame["vendor_id"].tolist() == ["v-1", "v-2"]
    assert frame.loc[0, "min_price"] == 120
    assert frame["min_price"].isna().tolist() == [False, True]
