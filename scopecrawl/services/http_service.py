import requests
from typing import Callable

from scopecrawl.domain.http_response import HttpResponse
from scopecrawl.exceptions import HttpFetchError


class HttpService:
    """
    HTTP client wrapper for fetching web pages and robots.txt files.

    Requires an `http_client` callable with the `requests.get` signature so
    tests can inject a fake client.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str) -> HttpResponse:
        """Fetch URL and return status code, body text, Content-Type and the final (redirected) URL."""
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }
        try:
            resp = self.http_client(url, headers=headers, timeout=self.timeout, allow_redirects=True)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        # Extract Content-Type if response has headers; let real exceptions bubble up.
        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        final_url = getattr(resp, 'url', None)
        if not isinstance(final_url, str) or not final_url:
            final_url = url

        return HttpResponse(resp.status_code, resp.text, ct, final_url)

    def fetch_robots(self, robots_url: str) -> HttpResponse:
        """Fetch robots.txt - delegates to fetch()."""
        return self.fetch(robots_url)
