from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, List, Optional

RECENT_URLS_LIMIT = 20


@dataclass
class CrawlRecord:
    id: str
    seed_url: str
    status: str
    started_at: datetime
    last_seen: datetime
    finished_at: Optional[datetime] = None
    stats: Dict[str, int] = field(default_factory=dict)
    current_url: Optional[str] = None
    error: Optional[str] = None
    recent_urls: Deque[str] = field(default_factory=lambda: deque(maxlen=RECENT_URLS_LIMIT))

    def get_recent_urls(self) -> List[str]:
        """Most recent first."""
        return list(reversed(self.recent_urls))

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "seed_url": self.seed_url,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "last_seen": self.last_seen.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "stats": dict(self.stats),
            "current_url": self.current_url,
            "error": self.error,
            "recent_urls": self.get_recent_urls(),
        }


@dataclass(frozen=True)
class CrawlHandle:
    crawl_id: str
    stop_event: threading.Event
