from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from scopecrawl.domain.http_response import HttpResponse
from scopecrawl.exceptions import FetchFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaywrightHeadlessOptions:
    timeout_ms: int = 30_000
    wait_until: str = "networkidle"  # domcontentloaded | load | networkidle
    settle_ms: int = 2_000
    viewport_width: int = 1920
    viewport_height: int = 1080


class PlaywrightHeadlessFetcher:
    """Headless browser fetcher backed by Playwright.

    Renders JavaScript-heavy pages and returns the final DOM HTML via
    `page.content()` together with the URL the page ended up on after
    redirects. Playwright is imported lazily so static-only installs still
    work.
    """

    def __init__(self, *, user_agent: str, options: Optional[PlaywrightHeadlessOptions] = None):
        self._user_agent = user_agent
        self._options = options or PlaywrightHeadlessOptions()
        self._executor = ThreadPoolExecutor(max_workers=3, thread_name_prefix="playwright")

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @property
    def options(self) -> PlaywrightHeadlessOptions:
        return self._options

    def _fetch_sync(self, url: str, stop_event) -> HttpResponse:
        if stop_event is not None and getattr(stop_event, "is_set", lambda: False)():
            raise FetchFailure(url, "Fetch cancelled")

        try:
            from playwright.sync_api import Error as PlaywrightError  # type: ignore
            from playwright.sync_api import sync_playwright  # type: ignore
        except ImportError as e:
            raise RuntimeError(
                "Headless fetch requested but Playwright is not installed. "
                "Install 'playwright' and run 'python -m playwright install chromium'."
            ) from e

        opts = self._options
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=True, args=["--no-sandbox", "--disable-dev-shm-usage"])
                try:
                    context = browser.new_context(
                        user_agent=self._user_agent,
                        viewport={"width": opts.viewport_width, "height": opts.viewport_height},
                        java_script_enabled=True,
                    )
                    page = context.new_page()
                    resp = page.goto(url, wait_until=opts.wait_until, timeout=opts.timeout_ms)
                    if opts.settle_ms > 0:
                        page.wait_for_timeout(opts.settle_ms)
                    status = int(resp.status) if resp is not None else 0
                    html = page.content()
                    return HttpResponse(status_code=status, text=html, content_type="text/html", final_url=page.url)
                finally:
                    try:
                        browser.close()
                    except PlaywrightError:
                        logger.debug("Error closing headless browser", exc_info=True)
        except PlaywrightError as e:
            raise FetchFailure(url, f"Failed to fetch page: {e}") from e

    def fetch(self, url: str, stop_event=None) -> HttpResponse:
        """Fetch a URL using Playwright in a thread when called from inside an asyncio loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self._fetch_sync(url, stop_event)
        future = self._executor.submit(self._fetch_sync, url, stop_event)
        return future.result()
