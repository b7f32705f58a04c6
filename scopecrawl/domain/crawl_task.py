from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CrawlTask:
    """A unit of frontier work: one discovered URL at the depth it was found."""

    url: str
    source_url: Optional[str]
    depth: int
