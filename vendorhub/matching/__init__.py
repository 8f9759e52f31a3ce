"""
Vendor matching engine.

Responsibilities:
- Accept event criteria (category, date, budget, location).
- Filter vendor profiles to those available, affordable and in category.
- Score candidates from their performance record.
- Return candidates ranked best-first, ties kept in store order.
"""
