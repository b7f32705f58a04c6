from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class VisitedEntry:
    source_url: Optional[str]
    depth: int


class VisitedTracker:
    """
    Tracks which normalized URLs have been visited during a crawl.

    The first entry recorded for a URL is permanent: a later discovery of
    the same URL (even at a shallower depth) never replaces it. The tracker
    is unbounded because evicting an entry would allow a second visit.
    """

    def __init__(self):
        self._visited: Dict[str, VisitedEntry] = {}

    def mark(self, url: str, entry: VisitedEntry) -> bool:
        """Record `entry` for `url`. Returns False if the URL was already visited."""
        if url in self._visited:
            return False
        self._visited[url] = entry
        return True

    def is_visited(self, url: str) -> bool:
        """Check if a URL has been visited."""
        return url in self._visited

    def get(self, url: str) -> Optional[VisitedEntry]:
        return self._visited.get(url)

    def __len__(self) -> int:
        return len(self._visited)

    def __contains__(self, url: str) -> bool:
        return url in self._visited
