from scopecrawl.domain.crawl_task import CrawlTask
from scopecrawl.domain.visited_tracker import VisitedEntry
from scopecrawl.services.frontier import Frontier


def test_fifo_order():
    frontier = Frontier()
    frontier.enqueue(CrawlTask("https://example.com/a", None, 0))
    frontier.enqueue(CrawlTask("https://example.com/b", None, 0))
    assert frontier.pending == 2
    assert frontier.dequeue().url == "https://example.com/a"
    assert frontier.dequeue().url == "https://example.com/b"
    assert frontier.dequeue() is None
    assert not frontier


def test_enqueue_skips_visited_urls():
    frontier = Frontier()
    frontier.mark_visited("https://example.com/a", VisitedEntry(None, 0))
    assert not frontier.enqueue(CrawlTask("http://example.com/a/", "https://example.com", 1))
    assert len(frontier) == 0


def test_invalid_urls_are_still_enqueued():
    frontier = Frontier()
    assert frontier.enqueue(CrawlTask("not a url", "https://example.com", 1))
    assert frontier.dequeue().url == "not a url"


def test_claim_is_first_wins():
    frontier = Frontier()
    first = CrawlTask("https://example.com/a", "https://example.com", 1)
    second = CrawlTask("https://example.com/a", "https://example.com/x", 2)
    assert frontier.claim("https://example.com/a", first)
    assert not frontier.claim("https://example.com/a", second)
    assert frontier.visited.get("https://example.com/a") == VisitedEntry("https://example.com", 1)


def test_enqueue_all_counts_queued_tasks():
    frontier = Frontier()
    frontier.mark_visited("https://example.com/b", VisitedEntry(None, 0))
    queued = frontier.enqueue_all([
        CrawlTask("https://example.com/a", None, 1),
        CrawlTask("https://example.com/b", None, 1),
    ])
    assert queued == 1
