"""Crawl report data model.

A `CrawlReport` is built incrementally while a crawl runs and frozen by
`finish()` when the crawl ends. It is the payload returned by the crawl
invocation surface.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class OutcomeStatus(str, Enum):
    ACCEPTED = "accepted"
    EXTERNAL = "external"
    EXCLUDED = "excluded"
    ERROR = "error"


@dataclass(frozen=True)
class UrlOutcome:
    """Terminal classification assigned to one visited URL."""

    url: str
    source_url: Optional[str]
    depth: int
    status: OutcomeStatus
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        d = {
            "url": self.url,
            "sourceUrl": self.source_url,
            "depth": self.depth,
            "status": self.status.value,
        }
        if self.reason:
            d["reason"] = self.reason
        return d


@dataclass
class CrawlStats:
    total: int = 0
    accepted: int = 0
    excluded: int = 0
    external: int = 0
    error: int = 0

    def count(self, status: OutcomeStatus) -> None:
        setattr(self, status.value, getattr(self, status.value) + 1)

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "accepted": self.accepted,
            "excluded": self.excluded,
            "external": self.external,
            "error": self.error,
        }


@dataclass
class CrawlReport:
    urls: List[UrlOutcome] = field(default_factory=list)
    stats: CrawlStats = field(default_factory=CrawlStats)
    by_depth: Dict[int, int] = field(default_factory=dict)
    stopped: bool = False
    finished: bool = False

    def count_visit(self) -> None:
        """Count a URL taken off the frontier and marked visited."""
        self._ensure_open()
        self.stats.total += 1

    def record(self, outcome: UrlOutcome) -> None:
        """Append an outcome. `by_depth` only counts accepted URLs."""
        self._ensure_open()
        self.urls.append(outcome)
        self.stats.count(outcome.status)
        if outcome.status is OutcomeStatus.ACCEPTED:
            self.by_depth[outcome.depth] = self.by_depth.get(outcome.depth, 0) + 1

    def finish(self, stopped: bool = False) -> "CrawlReport":
        self.stopped = stopped
        self.finished = True
        return self

    def _ensure_open(self) -> None:
        if self.finished:
            raise RuntimeError("crawl report is finished and can no longer change")

    @classmethod
    def for_invalid_seed(cls, seed_url: str, reason: str = "Invalid URL format") -> "CrawlReport":
        report = cls()
        report.count_visit()
        report.record(UrlOutcome(url=seed_url, source_url=None, depth=0, status=OutcomeStatus.ERROR, reason=reason))
        report.by_depth[0] = 0
        return report.finish()

    def to_dict(self) -> dict:
        return {
            "urls": [o.to_dict() for o in self.urls],
            "stats": self.stats.to_dict(),
            "byDepth": {depth: count for depth, count in sorted(self.by_depth.items())},
            "stopped": self.stopped,
        }
