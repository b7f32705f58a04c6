"""Custom exceptions for ScopeCrawl services.

Every per-URL failure raised inside the crawl engine derives from
`CrawlError`; the executor catches these, classifies them and folds them into
the crawl report. None of them crosses `CrawlExecutor.crawl()`.
"""
from typing import Optional


class ConfigNotFoundError(Exception):
    """Raised when a requested crawl config file cannot be found or read."""

    def __init__(self, config_path: str, reason: str = "not found"):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Config '{config_path}' {reason}")


class CrawlError(Exception):
    """Base class for per-URL crawl failures."""

    def __init__(self, url: Optional[str], reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}" if url else reason)


class InvalidUrl(CrawlError):
    """Raised when a URL cannot be parsed as an absolute http(s) URL."""

    def __init__(self, url: Optional[str], reason: str = "Invalid URL format"):
        super().__init__(url, reason)


class FetchFailure(CrawlError):
    """Raised when a page could not be fetched (network, timeout, non-2xx)."""


class HttpFetchError(FetchFailure):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.original = original
        super().__init__(url, f"HTTP fetch failed: {original}")

    def __str__(self) -> str:
        return f"HTTP fetch failed for {self.url}: {self.original}"


class RobotsDenied(CrawlError):
    """Raised when robots.txt disallows fetching a URL."""

    def __init__(self, url: str, reason: str = "Blocked by robots.txt"):
        super().__init__(url, reason)


class ExclusionMatched(CrawlError):
    """Raised when a URL matches a built-in filter or a user exclusion rule."""

    def __init__(self, url: str, rule: str):
        self.rule = rule
        super().__init__(url, f"Matched exclusion rule: {rule}")


class ExternalHost(CrawlError):
    """Raised when a URL lives outside the host being crawled."""

    def __init__(self, url: str, reason: str = "External URL"):
        super().__init__(url, reason)
