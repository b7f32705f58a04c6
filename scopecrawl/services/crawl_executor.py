import logging
import time
from enum import Enum
from typing import Callable, Optional, Sequence

from scopecrawl.domain.config import CrawlerConfig
from scopecrawl.domain.crawl_context import CrawlContext
from scopecrawl.domain.crawl_report import CrawlReport, OutcomeStatus, UrlOutcome
from scopecrawl.domain.crawl_task import CrawlTask
from scopecrawl.domain.http_response import HttpResponse
from scopecrawl.exceptions import (
    CrawlError,
    ExclusionMatched,
    ExternalHost,
    FetchFailure,
    InvalidUrl,
    RobotsDenied,
)
from scopecrawl.services.fetcher import Fetcher
from scopecrawl.services.fetcher_factory import FetcherFactory
from scopecrawl.services.reporter import NullReporter, Reporter
from scopecrawl.services.url_normalizer import is_valid_seed_url, normalize

logger = logging.getLogger(__name__)


class CrawlState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    FINISHED = "finished"


class CrawlExecutor:
    """Runs one breadth-first crawl and returns its `CrawlReport`.

    Traversal is strictly sequential: a task is fully processed (policy
    checks, fetch, link extraction, enqueueing children) before the next one
    is dequeued. Per-URL failures become `error` outcomes; an invalid seed
    produces a one-entry error report. Nothing is raised to the caller.

    Cancellation is cooperative: `stop_event` is checked before every
    dequeue, so an in-flight fetch always finishes and is recorded.
    """

    def __init__(
        self,
        *,
        crawl_policy,
        link_extractor,
        fetcher_factory: FetcherFactory,
        delay_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.crawl_policy = crawl_policy
        self.link_extractor = link_extractor
        self.fetcher_factory = fetcher_factory
        self.delay_seconds = float(delay_seconds or 0)
        self._sleep = sleep
        self.state = CrawlState.IDLE

    def _is_stopped(self, stop_event) -> bool:
        return stop_event is not None and getattr(stop_event, "is_set", lambda: False)()

    def crawl(
        self,
        seed_url: str,
        max_depth: Optional[int] = None,
        exclusion_rules: Sequence[str] = (),
        *,
        robots: bool = True,
        fetch_mode: str = "static",
        stop_event=None,
        reporter: Optional[Reporter] = None,
    ) -> CrawlReport:
        """Crawl from `seed_url`; `max_depth=None` means unbounded."""
        config = CrawlerConfig(
            seed_url=seed_url,
            max_depth=max_depth,
            exclusion_rules=exclusion_rules,
            robots=robots,
            fetch_mode=fetch_mode,
        )
        return self.crawl_config(config, stop_event=stop_event, reporter=reporter)

    def crawl_config(self, config: CrawlerConfig, stop_event=None, reporter: Optional[Reporter] = None) -> CrawlReport:
        if config is None:
            raise ValueError("config is required for crawl")
        reporter = reporter if reporter is not None else NullReporter()

        if not is_valid_seed_url(config.seed_url):
            logger.warning("Invalid seed URL %r", config.seed_url)
            report = CrawlReport.for_invalid_seed(config.seed_url)
            for outcome in report.urls:
                reporter.on_outcome(outcome)
            reporter.on_progress(report.stats)
            self.state = CrawlState.FINISHED
            return report

        context = CrawlContext(config)
        fetcher = self.fetcher_factory.get(config.fetch_mode, config)
        self.state = CrawlState.RUNNING
        logger.info("Starting crawl of %s (max_depth=%s, mode=%s)", context.seed_url, config.max_depth, config.fetch_mode)

        context.frontier.enqueue(CrawlTask(url=config.seed_url, source_url=None, depth=0))
        stopped = False
        while context.frontier:
            if self._is_stopped(stop_event):
                self.state = CrawlState.DRAINING
                logger.info("Crawl of %s cancelled with %d task(s) pending", context.seed_url, context.frontier.pending)
                stopped = True
                break
            task = context.frontier.dequeue()
            fetched_url = self.process_task(task, context, fetcher, reporter, stop_event)
            reporter.on_progress(context.report.stats)
            if fetched_url is not None and context.frontier:
                self._pause(fetched_url, context, stop_event)

        self.state = CrawlState.FINISHED
        report = context.report.finish(stopped=stopped)
        logger.info("Crawl of %s finished: %s", context.seed_url, report.stats.to_dict())
        return report

    def _record(self, context: CrawlContext, reporter: Reporter, task: CrawlTask, url: str,
                status: OutcomeStatus, reason: Optional[str] = None) -> None:
        outcome = UrlOutcome(url=url, source_url=task.source_url, depth=task.depth, status=status, reason=reason)
        context.report.record(outcome)
        reporter.on_outcome(outcome)

    def process_task(self, task: CrawlTask, context: CrawlContext, fetcher: Fetcher,
                     reporter: Reporter, stop_event=None) -> Optional[str]:
        """Visit one task. Returns the normalized URL if a fetch was attempted, else None."""
        try:
            url = normalize(task.url)
        except InvalidUrl as e:
            key = str(task.url or "").strip()
            if not context.frontier.claim(key, task):
                return None
            context.report.count_visit()
            logger.debug("Invalid URL %r from %s", task.url, task.source_url)
            self._record(context, reporter, task, key, OutcomeStatus.ERROR, e.reason)
            return None

        # Duplicate suppression at dequeue time: the same URL may have been queued twice.
        if not context.frontier.claim(url, task):
            logger.debug("Skipping (visited) %s", url)
            return None
        context.report.count_visit()

        try:
            self.crawl_policy.check(url, context)
        except ExternalHost as e:
            self._record(context, reporter, task, url, OutcomeStatus.EXTERNAL, e.reason)
            return None
        except (ExclusionMatched, RobotsDenied) as e:
            self._record(context, reporter, task, url, OutcomeStatus.EXCLUDED, e.reason)
            return None
        except Exception as e:
            logger.exception("Policy check failed for %s", url)
            self._record(context, reporter, task, url, OutcomeStatus.ERROR, str(e))
            return None

        try:
            response = self.fetch(url, fetcher, stop_event)
        except CrawlError as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            self._record(context, reporter, task, url, OutcomeStatus.ERROR, e.reason)
            return url
        except Exception as e:
            logger.error("Fetch error for %s: %s", url, e, exc_info=True)
            self._record(context, reporter, task, url, OutcomeStatus.ERROR, str(e) or type(e).__name__)
            return url

        self._record(context, reporter, task, url, OutcomeStatus.ACCEPTED)
        logger.info("Fetched %s -> status %s at depth %s", url, response.status_code, task.depth)

        try:
            self.enqueue_children(url, response, task, context)
        except Exception:
            logger.exception("Error extracting links from %s", url)
        return url

    def fetch(self, url: str, fetcher: Fetcher, stop_event=None) -> HttpResponse:
        """Fetch URL; raises `FetchFailure` for transport errors and non-2xx responses."""
        response = fetcher.fetch(url, stop_event=stop_event)
        try:
            ok = response.ok
        except (TypeError, ValueError):
            ok = False
        if not ok:
            raise FetchFailure(url, f"HTTP {response.status_code}")
        return response

    def enqueue_children(self, url: str, response: HttpResponse, task: CrawlTask, context: CrawlContext) -> int:
        """Queue the links found on a fetched page one level deeper. Returns how many were queued."""
        if not context.can_descend(task.depth):
            logger.debug("Not following links from %s: max depth %s reached", url, context.max_depth)
            return 0

        base_url = response.final_url or url
        links = self.link_extractor.extract_links(response.text, base_url)
        queued = 0
        for link in links:
            try:
                child = normalize(link, base_url)
            except InvalidUrl:
                # Kept raw; recorded as an error outcome when dequeued.
                child = link
            else:
                if context.is_visited(child):
                    continue
            if context.frontier.enqueue(CrawlTask(url=child, source_url=url, depth=task.depth + 1)):
                queued += 1
        logger.debug("Queued %d of %d links from %s", queued, len(links), url)
        return queued

    def _pause(self, url: str, context: CrawlContext, stop_event=None) -> None:
        delay = context.config.delay_seconds
        if delay is None:
            delay = self.delay_seconds
        try:
            delay = max(delay, float(self.crawl_policy.crawl_delay(url, context) or 0))
        except Exception:
            logger.warning("Could not read crawl-delay for %s", url, exc_info=True)
        if delay <= 0:
            return
        if stop_event is not None and hasattr(stop_event, "wait"):
            stop_event.wait(delay)
        else:
            self._sleep(delay)
