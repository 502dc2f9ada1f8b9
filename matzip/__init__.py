"""
Location-based restaurant recommendation service.

A map click becomes an address (and optionally coordinates); the
recommendation pipeline searches nearby eateries, annotates travel
distance, and backfills AI-written menus and blurbs.
"""
