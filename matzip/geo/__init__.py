"""
Geo and text helpers.

Responsibilities:
- Great-circle distance and short-range coordinate projection.
- Korean address parsing (city / district / dong).
- Cuisine normalisation from provider category paths.
- Cleanup of markup and HTML entities in provider text fields.
"""
