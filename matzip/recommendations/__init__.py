"""
Restaurant recommendation pipeline.

Responsibilities:
- Accept a location (address, optional coordinates).
- Expand keywords, fan out local searches, deduplicate results.
- Annotate driving distance, scrape place facts, backfill AI menus and blurbs.
- Return an ordered list of enriched restaurants ready for API serialisation.
"""
