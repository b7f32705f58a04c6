from typing import Optional

from scopecrawl.domain.config import CrawlerConfig
from scopecrawl.domain.crawl_report import CrawlReport
from scopecrawl.services.exclusion_matcher import ExclusionMatcher
from scopecrawl.services.frontier import Frontier
from scopecrawl.services.url_normalizer import normalize, site_host


class CrawlContext:
    """Everything one `crawl()` call owns: config, frontier, visited set and report.

    A context is never shared between crawls.
    """

    def __init__(self, config: CrawlerConfig, frontier: Optional[Frontier] = None):
        self.config = config
        self.max_depth: Optional[int] = config.max_depth
        self.seed_url: str = normalize(config.seed_url)
        self.seed_host: str = site_host(self.seed_url)
        self.exclusion_matcher = ExclusionMatcher(config.exclusion_rules)
        self.frontier = frontier if frontier is not None else Frontier()
        self.report = CrawlReport()

    def can_descend(self, depth: int) -> bool:
        """True if children of a page at `depth` may still be enqueued."""
        return self.max_depth is None or depth < self.max_depth

    def is_visited(self, normalized_url: str) -> bool:
        return self.frontier.is_visited(normalized_url)
