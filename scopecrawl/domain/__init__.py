"""Domain objects for ScopeCrawl - explicit re-exports to satisfy linters."""
from .config import CrawlerConfig as CrawlerConfig
from .crawl_report import CrawlReport as CrawlReport
from .crawl_report import CrawlStats as CrawlStats
from .crawl_report import OutcomeStatus as OutcomeStatus
from .crawl_report import UrlOutcome as UrlOutcome
from .crawl_session import CrawlSession as CrawlSession
from .crawl_task import CrawlTask as CrawlTask
from .visited_tracker import VisitedTracker as VisitedTracker

__all__ = [
    "CrawlerConfig",
    "CrawlReport",
    "CrawlStats",
    "OutcomeStatus",
    "UrlOutcome",
    "CrawlSession",
    "CrawlTask",
    "VisitedTracker",
]
