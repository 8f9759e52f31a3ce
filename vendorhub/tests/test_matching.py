from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from vendorhub.app import app
from vendorhub.matching.cache import get_cache_stats
from vendorhub.matching.engine import match_vendors
from vendorhub.matching.models import MatchCriteria
from vendorhub.profiles.availability import set_slot
from vendorhub.profiles.store import get_store

client = TestClient(app)

CRITERIA = MatchCriteria(category="Photography", date="2024-06-01", max_budget=600)
MATCH_PARAMS = {"category": "Photography", "date": "2024-06-01", "budget": 600}


def _login_user(c):
    c.post("/auth/login", json={"username": "user", "password": "user123"})


def _login_admin(c):
    c.post("/auth/login", json={"username": "admin", "password": "admin123"})


def _seed_pair(make_profile):
    store = get_store()
    store.save(make_profile(
        "vendor-a",
        prices=(500,),
        performance={"average_rating": 4.5, "completion_rate": 90, "response_time": 10},
    ))
    store.save(make_profile(
        "vendor-b",
        prices=(480,),
        performance={"average_rating": 4.0, "completion_rate": 95, "response_time": 2},
    ))


# ── Engine ───────────────────────────────────────────────────────────────


def test_higher_completion_rate_ranks_first(make_profile):
    _seed_pair(make_profile)
    response = match_vendors(CRITERIA)
    assert [item.profile.vendor_id for item in response.results] == ["vendor-b", "vendor-a"]
    assert response.results[0].score == pytest.approx(30.2, abs=1e-4)
    assert response.results[1].score == pytest.approx(28.8273, abs=1e-4)
    assert response.total_candidates == 2


def test_equal_scores_keep_store_order(make_profile):
    store = get_store()
    same = {"average_rating": 4.0, "completion_rate": 80, "response_time": 5}
    for vid in ("v-x", "v-y", "v-z"):
        store.save(make_profile(vid, performance=same))
    store.save(make_profile("v-top", performance={**same, "average_rating": 5.0}))

    for _ in range(3):
        ids = [item.profile.vendor_id for item in match_vendors(CRITERIA).results]
        assert ids == ["v-top", "v-x", "v-y", "v-z"]


def test_zero_score_ties_keep_store_order(make_profile):
    store = get_store()
    for vid in ("v-3", "v-1", "v-2"):
        store.save(make_profile(vid))
    ids = [item.profile.vendor_id for item in match_vendors(CRITERIA).results]
    assert ids == ["v-3", "v-1", "v-2"]


def test_ineligible_vendors_never_returned(make_profile):
    store = get_store()
    store.save(make_profile("v-ok"))
    store.save(make_profile("v-venue", categories=("Venue",)))
    store.save(make_profile("v-busy", slots=(("2024-06-01", "booked"),)))
    store.save(make_profile("v-pricey", prices=(601,)))
    ids = [item.profile.vendor_id for item in match_vendors(CRITERIA).results]
    assert ids == ["v-ok"]


def test_no_match_is_an_empty_result(make_profile):
    get_store().save(make_profile("v-1", categories=("Music",)))
    response = match_vendors(CRITERIA)
    assert response.results == []
    assert response.total_candidates == 0


def test_empty_store_is_an_empty_result():
    assert match_vendors(CRITERIA).results == []


def test_repeat_search_is_served_from_cache(make_profile):
    _seed_pair(make_profile)
    first = match_vendors(CRITERIA)
    second = match_vendors(CRITERIA)
    assert second == first
    stats = get_cache_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1


def test_profile_write_retires_cached_results(make_profile):
    _seed_pair(make_profile)
    assert len(match_vendors(CRITERIA).results) == 2

    get_store().update("vendor-b", lambda p: set_slot(p.availability, "2024-06-01", "booked"))

    ids = [item.profile.vendor_id for item in match_vendors(CRITERIA).results]
    assert ids == ["vendor-a"]


def test_cache_keeps_only_current_results(make_profile):
    _seed_pair(make_profile)
    store = get_store()
    for i in range(20):
        match_vendors(CRITERIA)
        status = "booked" if i % 2 else "available"
        store.update("vendor-a", lambda p: set_slot(p.availability, "2024-06-01", status))
    match_vendors(CRITERIA)
    assert get_cache_stats()["size"] == 1


def test_cached_results_are_not_shared(make_profile):
    _seed_pair(make_profile)
    first = match_vendors(CRITERIA)
    first.results.clear()
    second = match_vendors(CRITERIA)
    second.results[0].profile.business_name = "Changed"
    third = match_vendors(CRITERIA)
    assert get_cache_stats()["hits"] == 2
    assert [item.profile.vendor_id for item in third.results] == ["vendor-b", "vendor-a"]
    assert third.results[0].profile.business_name == "vendor-b Studio"


# ── HTTP ─────────────────────────────────────────────────────────────────


def test_match_endpoint_orders_results(make_profile):
    _seed_pair(make_profile)
    _login_user(client)
    resp = client.get("/vendor/match", params=MATCH_PARAMS)
    assert resp.status_code == 200
    body = resp.json()
    assert [r["profile"]["vendor_id"] for r in body["results"]] == ["vendor-b", "vendor-a"]
    scores = [r["score"] for r in body["results"]]
    assert scores == sorted(scores, reverse=True)


def test_match_endpoint_accepts_iso_timestamps(make_profile):
    _seed_pair(make_profile)
    _login_user(client)
    resp = client.get("/vendor/match", params={**MATCH_PARAMS, "date": "2024-06-01T09:30:00.000Z"})
    assert resp.status_code == 200
    assert resp.json()["total_candidates"] == 2


def test_match_endpoint_ignores_location(make_profile):
    _seed_pair(make_profile)
    _login_user(client)
    resp = client.get("/vendor/match", params={**MATCH_PARAMS, "location": "Lisbon"})
    assert resp.json()["total_candidates"] == 2


def test_match_endpoint_no_match_is_200():
    _login_user(client)
    resp = client.get("/vendor/match", params=MATCH_PARAMS)
    assert resp.status_code == 200
    assert resp.json() == {"results": [], "total_candidates": 0}


def test_match_endpoint_open_to_vendors(make_profile):
    _seed_pair(make_profile)
    c = TestClient(app)
    c.post("/auth/login", json={"username": "vendor", "password": "vendor123"})
    assert c.get("/vendor/match", params=MATCH_PARAMS).status_code == 200


@pytest.mark.parametrize("params", [
    {"category": "Juggling", "date": "2024-06-01", "budget": 600},
    {"category": "Photography", "date": "next tuesday", "budget": 600},
    {"category": "Photography", "budget": 600},
    {"category": "Photography", "date": "2024-06-01"},
    {"category": "Photography", "date": "2024-06-01", "budget": "cheap"},
])
def test_match_endpoint_rejects_bad_criteria(params):
    _login_user(client)
    resp = client.get("/vendor/match", params=params)
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_failed"


def test_cache_stats_endpoint(make_profile):
    _seed_pair(make_profile)
    _login_user(client)
    client.get("/vendor/match", params=MATCH_PARAMS)
    client.get("/vendor/match", params=MATCH_PARAMS)
    _login_admin(client)
    resp = client.get("/cache/stats")
    assert resp.status_code == 200
    body = resp.json()
    assert body["hits"] >= 1
    assert "hit_rate" in body
