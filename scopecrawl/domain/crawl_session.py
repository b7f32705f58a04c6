import threading
from typing import Optional

from scopecrawl.domain.crawl_report import CrawlReport, CrawlStats, UrlOutcome


class CrawlSession:
    """
    Registry tracking for a single crawl execution.

    Acts as the executor's reporter: every outcome and progress tick is
    forwarded to the registry, and `stop_event` is the handle the registry
    sets on cancellation. Without a registry the session is inert apart from
    its own stop event.
    """

    def __init__(self, seed_url: str, registry=None, stop_event: Optional[threading.Event] = None):
        self.seed_url = seed_url
        self.crawl_id: Optional[str] = None
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self._registry = registry

    def start_tracking(self) -> None:
        """Create a registry record and adopt its crawl id and stop event."""
        if self._registry is not None:
            handle = self._registry.start(self.seed_url)
            self.crawl_id = handle.crawl_id
            self.stop_event = handle.stop_event

    def on_outcome(self, outcome: UrlOutcome) -> None:
        if self._registry is not None and self.crawl_id is not None:
            self._registry.update(self.crawl_id, current_url=outcome.url)

    def on_progress(self, stats: CrawlStats) -> None:
        if self._registry is not None and self.crawl_id is not None:
            self._registry.update(self.crawl_id, stats=stats.to_dict())

    def finish_tracking(self, report: Optional[CrawlReport] = None, error: Optional[str] = None) -> None:
        """Complete registry tracking.

        Status is "failed" when `error` is given, "cancelled" when the report
        says the crawl was stopped, otherwise "finished".
        """
        if self._registry is None or self.crawl_id is None:
            return
        if error:
            status = "failed"
        elif report is not None and report.stopped:
            status = "cancelled"
        else:
            status = "finished"
        if report is not None:
            self._registry.update(self.crawl_id, stats=report.stats.to_dict())
        self._registry.finish(self.crawl_id, status=status, error=error)

    def is_stopped(self) -> bool:
        return self.stop_event.is_set()

    def mark_stopped(self) -> None:
        self.stop_event.set()
