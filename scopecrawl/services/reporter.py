"""Progress sinks for a running crawl.

The executor calls a `Reporter` for every recorded outcome and after every
processed task. Presentation (API responses, registry tracking, logs) lives
behind this interface, never inside the executor.
"""
import logging
from typing import Protocol, Sequence

from scopecrawl.domain.crawl_report import CrawlStats, UrlOutcome

logger = logging.getLogger(__name__)


class Reporter(Protocol):
    def on_outcome(self, outcome: UrlOutcome) -> None: ...

    def on_progress(self, stats: CrawlStats) -> None: ...


class NullReporter:
    def on_outcome(self, outcome: UrlOutcome) -> None:
        pass

    def on_progress(self, stats: CrawlStats) -> None:
        pass


class LoggingReporter:
    def __init__(self, log: logging.Logger = logger):
        self._log = log

    def on_outcome(self, outcome: UrlOutcome) -> None:
        if outcome.reason:
            self._log.info("[%s] depth=%s %s (%s)", outcome.status.value, outcome.depth, outcome.url, outcome.reason)
        else:
            self._log.info("[%s] depth=%s %s", outcome.status.value, outcome.depth, outcome.url)

    def on_progress(self, stats: CrawlStats) -> None:
        self._log.debug("Progress: %s", stats.to_dict())


class MultiReporter:
    """Fan out to several reporters; a failing reporter never breaks the crawl."""

    def __init__(self, reporters: Sequence[Reporter]):
        self._reporters = list(reporters)

    def on_outcome(self, outcome: UrlOutcome) -> None:
        for r in self._reporters:
            try:
                r.on_outcome(outcome)
            except Exception:
                logger.exception("Reporter %r failed on outcome for %s", r, outcome.url)

    def on_progress(self, stats: CrawlStats) -> None:
        for r in self._reporters:
            try:
                r.on_progress(stats)
            except Exception:
                logger.exception("Reporter %r failed on progress update", r)
