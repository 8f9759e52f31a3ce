from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "match"]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top categories
    category_counter: Counter[str] = Counter()
    for s in searches:
        category_counter[s.get("category", "unknown")] += 1
    top_categories = [{"name": n, "count": c} for n, c in category_counter.most_common(10)]

    # Result sizes
    candidate_counts = [s.get("total_candidates", 0) for s in searches]
    zero_results = sum(1 for c in candidate_counts if c == 0)
    avg_candidates = round(sum(candidate_counts) / total, 1) if total else 0.0

    # Budget spread
    budgets = [s["max_budget"] for s in searches if s.get("max_budget") is not None]
    budget_stats = {
        "min": min(budgets) if budgets else 0.0,
        "max": max(budgets) if budgets else 0.0,
        "avg": round(sum(budgets) / len(budgets), 2) if budgets else 0.0,
    }

    # Cache stats
    cache_hits = sum(1 for s in searches if s.get("cache_hit"))
    cache_misses = total - cache_hits

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_categories": top_categories,
        "avg_candidates": avg_candidates,
        "zero_result_rate": round(zero_results / total * 100, 1) if total else 0.0,
        "budget": budget_stats,
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
    }
