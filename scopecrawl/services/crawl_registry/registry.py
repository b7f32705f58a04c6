from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .cancellation import _CrawlCancellationManager
from .models import CrawlHandle
from .store import CANCELLED, FINISHED, _CrawlRecordStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCrawlRegistry:
    """Thread-safe in-memory registry of running and recently completed crawls.

    Ephemeral and single-process: it exists so API callers can watch progress
    and request cancellation of crawls running in worker threads.
    """

    def __init__(self, *, max_completed_records: int = 1000, clock=_utcnow):
        self._lock = threading.Lock()
        self._clock = clock
        self._records = _CrawlRecordStore(max_completed_records=max_completed_records)
        self._cancellation = _CrawlCancellationManager()

    def start(self, seed_url: str) -> CrawlHandle:
        with self._lock:
            cid = str(uuid.uuid4())
            self._records.create_running(crawl_id=cid, seed_url=seed_url, now=self._clock())
            stop_event = self._cancellation.create(cid)
            return CrawlHandle(crawl_id=cid, stop_event=stop_event)

    def update(self, crawl_id: str, *, stats: Optional[Dict[str, int]] = None, current_url: Optional[str] = None) -> bool:
        with self._lock:
            return self._records.update(crawl_id, stats=stats, current_url=current_url, now=self._clock())

    def finish(self, crawl_id: str, *, status: str = FINISHED, error: Optional[str] = None) -> bool:
        with self._lock:
            ok = self._records.complete(crawl_id, status=status, error=error, now=self._clock())
            if ok:
                self._cancellation.release(crawl_id)
                for evicted_id in self._records.evict_completed_overflow():
                    self._cancellation.release(evicted_id)
            return ok

    def cancel(self, crawl_id: str) -> bool:
        """Set the crawl's stop event and mark it cancelled.

        The executor notices the event before its next dequeue; the page in
        flight still completes.
        """
        with self._lock:
            if not self._cancellation.request_cancel(crawl_id):
                return False
            if not self._records.complete(crawl_id, status=CANCELLED, error=None, now=self._clock()):
                return False
            # Holders of the event keep their reference.
            self._cancellation.release(crawl_id)
            for evicted_id in self._records.evict_completed_overflow():
                self._cancellation.release(evicted_id)
            return True

    def get(self, crawl_id: str) -> Optional[Dict]:
        with self._lock:
            rec = self._records.get(crawl_id)
            return rec.to_dict() if rec else None

    def get_stop_event(self, crawl_id: str) -> Optional[threading.Event]:
        with self._lock:
            return self._cancellation.get(crawl_id)

    def list_active(self) -> List[Dict]:
        with self._lock:
            return [r.to_dict() for r in self._records.list_active()]
