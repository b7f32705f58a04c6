"""Tests for CrawlSession registry tracking."""
import threading
from unittest.mock import Mock

from scopecrawl.domain import CrawlReport, CrawlSession, CrawlStats, OutcomeStatus, UrlOutcome


def _registry(crawl_id="crawl-abc-123"):
    registry = Mock()
    handle = Mock()
    handle.crawl_id = crawl_id
    handle.stop_event = threading.Event()
    registry.start.return_value = handle
    return registry, handle


def test_session_without_registry_tracking_is_noop():
    session = CrawlSession("https://example.com", registry=None)

    session.start_tracking()
    session.on_outcome(UrlOutcome("https://example.com", None, 0, OutcomeStatus.ACCEPTED))
    session.on_progress(CrawlStats())
    session.finish_tracking(CrawlReport())

    assert session.crawl_id is None
    assert session.stop_event is not None


def test_session_start_tracking_adopts_handle():
    registry, handle = _registry()
    session = CrawlSession("https://example.com", registry=registry)

    session.start_tracking()

    registry.start.assert_called_once_with("https://example.com")
    assert session.crawl_id == "crawl-abc-123"
    assert session.stop_event is handle.stop_event


def test_session_forwards_outcomes_and_progress():
    registry, _ = _registry()
    session = CrawlSession("https://example.com", registry=registry)
    session.start_tracking()

    session.on_outcome(UrlOutcome("https://example.com/a", "https://example.com", 1, OutcomeStatus.ACCEPTED))
    session.on_progress(CrawlStats(total=2, accepted=1))

    registry.update.assert_any_call("crawl-abc-123", current_url="https://example.com/a")
    registry.update.assert_any_call(
        "crawl-abc-123",
        stats={"total": 2, "accepted": 1, "excluded": 0, "external": 0, "error": 0},
    )


def test_finish_tracking_status():
    registry, _ = _registry()
    session = CrawlSession("https://example.com", registry=registry)
    session.start_tracking()
    session.finish_tracking(CrawlReport().finish())
    registry.finish.assert_called_with("crawl-abc-123", status="finished", error=None)

    session.finish_tracking(CrawlReport().finish(stopped=True))
    registry.finish.assert_called_with("crawl-abc-123", status="cancelled", error=None)

    session.finish_tracking(error="boom")
    registry.finish.assert_called_with("crawl-abc-123", status="failed", error="boom")


def test_mark_stopped_sets_event():
    session = CrawlSession("https://example.com")
    assert not session.is_stopped()
    session.mark_stopped()
    assert session.is_stopped()
