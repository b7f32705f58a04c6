from __future__ import annotations

from dataclasses import dataclass

from scopecrawl.services.fetcher import Fetcher
from scopecrawl.services.headless_browser_fetcher import PlaywrightHeadlessFetcher, PlaywrightHeadlessOptions


@dataclass(frozen=True)
class FetcherFactory:
    http_fetcher: Fetcher
    headless_fetcher: Fetcher

    def get(self, fetch_mode: str, config=None) -> Fetcher:
        if fetch_mode is None or (isinstance(fetch_mode, str) and fetch_mode.strip() == ""):
            raise ValueError("fetch_mode is required")
        mode = fetch_mode.strip().lower()
        if mode == "static":
            return self.http_fetcher
        if mode == "headless":
            options = getattr(config, "headless_options", None) if config is not None else None
            if options and isinstance(self.headless_fetcher, PlaywrightHeadlessFetcher):
                base = self.headless_fetcher.options
                configured = PlaywrightHeadlessOptions(
                    timeout_ms=int(options.get("timeout_ms", base.timeout_ms)),
                    wait_until=options.get("wait_until", base.wait_until),
                    settle_ms=int(options.get("settle_ms", base.settle_ms)),
                )
                return PlaywrightHeadlessFetcher(user_agent=self.headless_fetcher.user_agent, options=configured)
            return self.headless_fetcher
        raise ValueError(f"Unknown fetch_mode: {fetch_mode!r}")
