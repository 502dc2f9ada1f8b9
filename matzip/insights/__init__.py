"""
AI-written content for search results.

Responsibilities:
- Expand an address into search keywords (with a static fallback list).
- Write blurbs, guess representative menus, and compose comparisons and
  reviews for restaurants.
- Never raise on model failure: every call has degraded fallback content.
"""
