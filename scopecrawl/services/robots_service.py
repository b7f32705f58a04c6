from urllib.parse import urlsplit
import logging
from typing import Optional

from scopecrawl.services.robots_fetcher import RobotsFetcher
from scopecrawl.services.robots_cache import RobotsCache
from scopecrawl.services.robots_policy import RobotsPolicy, WILDCARD_AGENT

logger = logging.getLogger(__name__)


def origin_of(url: str) -> Optional[str]:
    try:
        parsed = urlsplit(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"


class RobotsService:
    """
    Service for checking robots.txt permissions.

    Orchestrates fetching, caching, and permission checking for robots.txt
    files. `robots_agent` is the user-agent token looked up in robots.txt
    groups (`*` uses the wildcard group).
    """

    def __init__(self, http_service, robots_agent: str = WILDCARD_AGENT,
                 robots_fetcher: Optional[RobotsFetcher] = None,
                 cache: Optional[RobotsCache] = None):
        self.http_service = http_service
        self.robots_agent = (robots_agent or WILDCARD_AGENT).strip().lower()
        self.robots_fetcher = robots_fetcher if robots_fetcher is not None else RobotsFetcher(http_service)
        self.cache = cache if cache is not None else RobotsCache()

    def policy_for(self, url: str) -> Optional[RobotsPolicy]:
        """Return the (possibly cached) policy for the origin of `url`."""
        origin = origin_of(url)
        if origin is None:
            return None

        entry = self.cache.lookup(origin)
        if entry is not None:
            return entry.policy

        policy = self.robots_fetcher.fetch(f"{origin}/robots.txt", origin)
        self.cache.set(origin, policy)
        return policy

    def allowed_by_robots(self, url: str, robots_enabled: bool = True) -> bool:
        if not robots_enabled:
            return True

        if origin_of(url) is None:
            # Fail open: invalid/relative URLs should not block crawling.
            return True

        try:
            policy = self.policy_for(url)
        except Exception:
            logger.exception("Error loading robots.txt for %s", url)
            return True

        if policy is None:
            return True
        return policy.is_allowed(url, self.robots_agent)

    def crawl_delay(self, url: str) -> float:
        """Crawl-delay requested by the origin of `url`, or 0."""
        try:
            policy = self.policy_for(url)
        except Exception:
            logger.exception("Error loading robots.txt for %s", url)
            return 0
        if policy is None:
            return 0
        return policy.get_crawl_delay(self.robots_agent)
