from __future__ import annotations

from typing import Protocol

from scopecrawl.domain.http_response import HttpResponse


class Fetcher(Protocol):
    """Fetch a URL and return a normalized HTTP-like response.

    Implementations raise `FetchFailure` (usually `HttpFetchError`) for
    transport errors. A non-2xx status is returned as-is; the executor
    decides what it means.
    """

    def fetch(self, url: str, stop_event=None) -> HttpResponse: ...


class HttpServiceFetcher:
    """Static fetcher: a plain HTTP GET through `HttpService`."""

    def __init__(self, http_service):
        self._http_service = http_service

    @property
    def http_service(self):
        return self._http_service

    def fetch(self, url: str, stop_event=None) -> HttpResponse:
        return self._http_service.fetch(url)
