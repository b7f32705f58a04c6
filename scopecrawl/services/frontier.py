import logging
from collections import deque
from typing import Deque, Iterable, Optional

from scopecrawl.domain.crawl_task import CrawlTask
from scopecrawl.domain.visited_tracker import VisitedEntry, VisitedTracker
from scopecrawl.exceptions import InvalidUrl
from scopecrawl.services.url_normalizer import normalize

logger = logging.getLogger(__name__)


class Frontier:
    """FIFO queue of crawl tasks plus the set of visited normalized URLs.

    `enqueue` drops tasks whose URL is already visited. Two tasks for the
    same URL can still sit in the queue at once (both discovered before
    either was visited), so consumers must call `claim` on dequeue to
    re-check and mark the URL.
    """

    def __init__(self, visited: Optional[VisitedTracker] = None):
        self._queue: Deque[CrawlTask] = deque()
        self.visited = visited if visited is not None else VisitedTracker()

    def enqueue(self, task: CrawlTask) -> bool:
        try:
            key = normalize(task.url)
        except InvalidUrl:
            # Queued anyway so the executor records the failure as an outcome.
            key = None
        if key is not None and self.visited.is_visited(key):
            logger.debug("Skipping (visited) %s", task.url)
            return False
        self._queue.append(task)
        return True

    def enqueue_all(self, tasks: Iterable[CrawlTask]) -> int:
        return sum(1 for task in tasks if self.enqueue(task))

    def dequeue(self) -> Optional[CrawlTask]:
        if not self._queue:
            return None
        return self._queue.popleft()

    def is_visited(self, normalized_url: str) -> bool:
        return self.visited.is_visited(normalized_url)

    def mark_visited(self, normalized_url: str, entry: VisitedEntry) -> bool:
        return self.visited.mark(normalized_url, entry)

    def claim(self, normalized_url: str, task: CrawlTask) -> bool:
        """Mark `normalized_url` visited for `task`. False if another task got there first."""
        return self.mark_visited(normalized_url, VisitedEntry(source_url=task.source_url, depth=task.depth))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
