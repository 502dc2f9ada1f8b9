"""
Best-effort place facts from the Naver map place page.

The scraper owns one headless browser for the whole process: it opens on
first use and is closed explicitly (or by the app's shutdown hook).
"""
