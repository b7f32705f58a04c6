import logging
from typing import Optional

from scopecrawl.exceptions import HttpFetchError
from scopecrawl.services.robots_policy import RobotsPolicy

logger = logging.getLogger(__name__)


class RobotsFetcher:
    """Fetch robots.txt content and return a parsed RobotsPolicy or None.

    Uses an `http_service` with a `fetch_robots(url)` method that returns
    an HttpResponse.
    """
    def __init__(self, http_service):
        self.http_service = http_service

    def fetch(self, robots_url: str, base_url: Optional[str] = None) -> Optional[RobotsPolicy]:
        try:
            response = self.http_service.fetch_robots(robots_url)
        except HttpFetchError:
            logger.warning("Network error fetching robots.txt from %s", robots_url, exc_info=True)
            return None

        if response.status_code != 200 or not response.text:
            logger.info("No robots.txt found at %s (%s)", robots_url, response.status_code)
            return None

        try:
            return RobotsPolicy.from_text(response.text, base_url or robots_url)
        except Exception:
            logger.exception("Error parsing robots.txt from %s", robots_url)
            return None
