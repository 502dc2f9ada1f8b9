from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional, Sequence
from urllib.parse import quote

from bs4 import BeautifulSoup
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..pacing import Pacer
from ..recommendations.models import PlaceFacts
from .config import DEFAULT_SCRAPER_CONFIG, ScraperConfig

logger = logging.getLogger(__name__)

PLACE_FRAME_MARKERS = ("entryIframe", "/place/", "pcmap.place.naver.com")

_RATING_RE = re.compile(r"별점\s*([0-5](?:\.\d+)?)")
_VISITOR_RE = re.compile(r"방문자\s*리뷰\s*([\d,]+)")
_BLOG_RE = re.compile(r"블로그\s*리뷰\s*([\d,]+)")
_HOURS_RE = re.compile(
    r"(영업\s*(?:중|전|종료)[^\n]{0,40}|\d{1,2}:\d{2}\s*에\s*영업\s*(?:시작|종료))"
)
_DESCRIPTION_MAX = 200


def _to_int(raw: str) -> int | None:
    try:
        return int(raw.replace(",", ""))
    except ValueError:
        return None


def parse_place_page(html: str) -> PlaceFacts | None:
    """Pull rating, review counts, hours and description out of a rendered page."""
    soup = BeautifulSoup(html or "", "html.parser")
    text = soup.get_text("\n", strip=True)

    rating_match = _RATING_RE.search(text)
    visitor_match = _VISITOR_RE.search(text)
    blog_match = _BLOG_RE.search(text)
    hours_match = _HOURS_RE.search(text)

    description = None
    meta = soup.find("meta", attrs={"property": "og:description"}) or soup.find(
        "meta", attrs={"name": "description"}
    )
    if meta and meta.get("content"):
        description = meta["content"].strip()[:_DESCRIPTION_MAX] or None

    facts = PlaceFacts(
        rating=float(rating_match.group(1)) if rating_match else None,
        review_count=_to_int(visitor_match.group(1)) if visitor_match else None,
        blog_review_count=_to_int(blog_match.group(1)) if blog_match else None,
        operating_hours=hours_match.group(1).strip() if hours_match else None,
        description=description,
    )
    if facts == PlaceFacts():
        return None
    return facts


class PlaywrightRenderer:
    """
    Headless Chromium owned by one dedicated worker thread.

    The Playwright sync API is bound to the thread that started it, so every
    browser call is submitted to the same single-thread executor. The browser
    starts lazily on the first render.
    """

    def __init__(self, config: ScraperConfig = DEFAULT_SCRAPER_CONFIG) -> None:
        self.config = config
        self._playwright = None
        self._browser = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="place-scraper")

    def _ensure_browser(self) -> None:
        if self._playwright is None:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.config.headless,
                args=["--no-sandbox", "--disable-dev-shm-usage"],
            )

    def _render(self, url: str) -> str:
        self._ensure_browser()
        page = self._browser.new_page(user_agent=self.config.user_agent)
        page.set_default_timeout(self.config.timeout_ms)
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=self.config.timeout_ms)
            page.wait_for_timeout(self.config.settle_ms)
            for frame in page.frames:
                if any(marker in (frame.name or "") + frame.url for marker in PLACE_FRAME_MARKERS):
                    return frame.content()
            return page.content()
        finally:
            page.close()

    def render(self, url: str, timeout: float | None = None) -> str:
        """Rendered HTML of ``url``; raises ``FutureTimeoutError`` after ``timeout`` seconds."""
        future = self._executor.submit(self._render, url)
        return future.result(timeout=timeout)

    def _close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    def close(self) -> None:
        self._executor.submit(self._close).result()
        self._executor.shutdown(wait=True)


class PlaceFactScraper:
    """
    ``crawl(name, address) -> PlaceFacts | None``.

    Slow and best-effort: any failure, timeout or empty page yields ``None``.
    """

    def __init__(
        self,
        config: ScraperConfig = DEFAULT_SCRAPER_CONFIG,
        renderer: Optional[PlaywrightRenderer] = None,
        pacer: Optional[Pacer] = None,
    ) -> None:
        self.config = config
        self._renderer = renderer
        self.pacer = pacer or Pacer(config.delay_seconds)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def _get_renderer(self) -> PlaywrightRenderer:
        if self._renderer is None:
            self._renderer = PlaywrightRenderer(self.config)
        return self._renderer

    def crawl(self, name: str, address: Optional[str] = None) -> PlaceFacts | None:
        if not self.enabled or not name.strip():
            return None

        # Leading district narrows same-name chains down to the right branch.
        area = " ".join((address or "").split()[:2])
        query = f"{area} {name}".strip()
        url = self.config.search_url.format(query=quote(query))

        self.pacer.wait()
        try:
            html = self._get_renderer().render(url, timeout=self.config.item_timeout_seconds)
        except (PlaywrightTimeoutError, FutureTimeoutError):
            logger.warning("Place page timed out for %s", name)
            return None
        except Exception as exc:  # noqa: BLE001
            logger.warning("Place page failed for %s: %s", name, exc)
            return None

        facts = parse_place_page(html)
        if facts is None:
            logger.info("No place facts found for %s", name)
        return facts

    def crawl_batch(
        self,
        items: Sequence[tuple[str, Optional[str]]],
    ) -> list[PlaceFacts | None]:
        """
        Crawl ``(name, address)`` pairs one after another, in order.

        The browser lives on a single thread, so items never overlap; the
        pacer spaces them ``delay_seconds`` apart.
        """
        logger.info("Crawling %d place pages", len(items))
        return [self.crawl(name, address) for name, address in items]

    def close(self) -> None:
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    def __enter__(self) -> "PlaceFactScraper":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
