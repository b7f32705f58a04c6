from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Deque, Dict, List, Optional

from .models import CrawlRecord

RUNNING = "running"
FINISHED = "finished"
CANCELLED = "cancelled"
FAILED = "failed"


class _CrawlRecordStore:
    """Records keyed by crawl id. Completed records are kept up to a bound, oldest evicted first."""

    def __init__(self, *, max_completed_records: int):
        if max_completed_records < 0:
            raise ValueError("max_completed_records must be >= 0")
        self._records: Dict[str, CrawlRecord] = {}
        self._max_completed_records = max_completed_records
        self._completed_order: Deque[str] = deque()

    def create_running(self, *, crawl_id: str, seed_url: str, now: datetime) -> CrawlRecord:
        rec = CrawlRecord(id=crawl_id, seed_url=seed_url, status=RUNNING, started_at=now, last_seen=now)
        self._records[crawl_id] = rec
        return rec

    def get(self, crawl_id: str) -> Optional[CrawlRecord]:
        return self._records.get(crawl_id)

    def update(
        self,
        crawl_id: str,
        *,
        stats: Optional[Dict[str, int]] = None,
        current_url: Optional[str] = None,
        now: datetime,
    ) -> bool:
        rec = self._records.get(crawl_id)
        if rec is None:
            return False
        if stats is not None:
            rec.stats = dict(stats)
        if current_url:
            rec.current_url = current_url
            if current_url not in rec.recent_urls:
                rec.recent_urls.append(current_url)
        rec.last_seen = now
        return True

    def complete(self, crawl_id: str, *, status: str, error: Optional[str], now: datetime) -> bool:
        rec = self._records.get(crawl_id)
        if rec is None:
            return False
        if rec.status != RUNNING:
            # Already cancelled or finished; keep the first terminal status.
            rec.last_seen = now
            return True
        rec.status = status
        rec.finished_at = now
        rec.last_seen = now
        if error:
            rec.error = error
        self._completed_order.append(crawl_id)
        return True

    def evict_completed_overflow(self) -> List[str]:
        evicted: List[str] = []
        while len(self._completed_order) > self._max_completed_records:
            oldest = self._completed_order.popleft()
            if self._records.pop(oldest, None) is not None:
                evicted.append(oldest)
        return evicted

    def list_active(self) -> List[CrawlRecord]:
        return [r for r in self._records.values() if r.status == RUNNING]
