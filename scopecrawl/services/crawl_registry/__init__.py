from .models import CrawlHandle, CrawlRecord
from .registry import InMemoryCrawlRegistry

__all__ = ["CrawlHandle", "CrawlRecord", "InMemoryCrawlRegistry"]
