from typing import Optional
import logging

from scopecrawl.domain.crawl_context import CrawlContext
from scopecrawl.exceptions import ExclusionMatched, ExternalHost, RobotsDenied
from scopecrawl.services.url_normalizer import is_same_host

logger = logging.getLogger(__name__)


class CrawlPolicy:
    """Encapsulates per-URL crawl decisions: host scope, exclusion rules, and robots.txt compliance.

    Checks run in that order; `check()` raises the matching `CrawlError`
    subclass for the first one that rejects the URL.
    """

    def __init__(self, robots_service=None):
        self.robots_service = robots_service

    def should_skip_due_to_host(self, url: str, context: CrawlContext) -> bool:
        """Check if URL is outside the host being crawled."""
        if not is_same_host(url, context.seed_host):
            logger.debug("Skipping (external) %s -> not same host as %s", url, context.seed_host)
            return True
        return False

    def exclusion_reason(self, url: str, context: CrawlContext) -> Optional[str]:
        """Return the built-in filter or user rule that excludes URL, if any."""
        return context.exclusion_matcher.match(url)

    def should_skip_due_to_robots(self, url: str, context: CrawlContext) -> bool:
        """Check if URL should be skipped due to robots.txt restrictions."""
        if self.robots_service is None:
            return False

        robots_enabled = True
        if context and context.config is not None:
            robots_enabled = context.config.robots

        if not self.robots_service.allowed_by_robots(url, robots_enabled):
            logger.info("Skipping (robots) %s", url)
            return True
        return False

    def check(self, url: str, context: CrawlContext) -> None:
        """Raise `ExternalHost`, `ExclusionMatched` or `RobotsDenied` if URL must not be fetched."""
        if self.should_skip_due_to_host(url, context):
            raise ExternalHost(url)
        rule = self.exclusion_reason(url, context)
        if rule is not None:
            raise ExclusionMatched(url, rule)
        if self.should_skip_due_to_robots(url, context):
            raise RobotsDenied(url)

    def crawl_delay(self, url: str, context: CrawlContext) -> float:
        """Crawl-delay requested by robots.txt for URL (0 when robots are not honored)."""
        if self.robots_service is None or not context.config.robots:
            return 0
        return self.robots_service.crawl_delay(url)
