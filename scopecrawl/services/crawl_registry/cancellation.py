from __future__ import annotations

import threading
from typing import Dict, Optional


class _CrawlCancellationManager:
    """One stop event per crawl id; setting it asks the executor to drain."""

    def __init__(self, *, event_factory=threading.Event):
        self._event_factory = event_factory
        self._events: Dict[str, threading.Event] = {}

    def create(self, crawl_id: str) -> threading.Event:
        ev = self._event_factory()
        self._events[crawl_id] = ev
        return ev

    def get(self, crawl_id: str) -> Optional[threading.Event]:
        return self._events.get(crawl_id)

    def request_cancel(self, crawl_id: str) -> bool:
        ev = self._events.get(crawl_id)
        if ev is None:
            return False
        ev.set()
        return True

    def release(self, crawl_id: str) -> None:
        self._events.pop(crawl_id, None)
