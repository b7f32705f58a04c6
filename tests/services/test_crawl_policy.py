from unittest.mock import Mock

import pytest

from scopecrawl.domain.config import CrawlerConfig
from scopecrawl.domain.crawl_context import CrawlContext
from scopecrawl.exceptions import ExclusionMatched, ExternalHost, InvalidUrl, RobotsDenied
from scopecrawl.services.crawl_policy import CrawlPolicy


def _context(robots=True, rules=("/blog",)):
    return CrawlContext(CrawlerConfig(seed_url="https://Example.com/", exclusion_rules=rules, robots=robots))


def test_context_normalizes_seed():
    ctx = _context()
    assert ctx.seed_url == "https://example.com"
    assert ctx.seed_host == "example.com"


def test_context_rejects_invalid_seed():
    with pytest.raises(InvalidUrl):
        CrawlContext(CrawlerConfig(seed_url="not-a-url"))


def test_can_descend():
    ctx = CrawlContext(CrawlerConfig(seed_url="https://example.com", max_depth=2))
    assert ctx.can_descend(1)
    assert not ctx.can_descend(2)
    assert _context().can_descend(1000)


def test_check_order_external_first():
    robots = Mock()
    robots.allowed_by_robots.return_value = False
    policy = CrawlPolicy(robots_service=robots)
    with pytest.raises(ExternalHost):
        policy.check("https://other.com/blog", _context())
    robots.allowed_by_robots.assert_not_called()


def test_exclusion_before_robots():
    robots = Mock()
    robots.allowed_by_robots.return_value = False
    policy = CrawlPolicy(robots_service=robots)
    with pytest.raises(ExclusionMatched) as exc:
        policy.check("https://example.com/blog/post", _context())
    assert exc.value.rule == "/blog"
    robots.allowed_by_robots.assert_not_called()


def test_robots_denial():
    robots = Mock()
    robots.allowed_by_robots.return_value = False
    policy = CrawlPolicy(robots_service=robots)
    with pytest.raises(RobotsDenied) as exc:
        policy.check("https://example.com/about", _context())
    assert exc.value.reason == "Blocked by robots.txt"
    robots.allowed_by_robots.assert_called_once_with("https://example.com/about", True)


def test_robots_flag_is_passed_through():
    robots = Mock()
    robots.allowed_by_robots.return_value = True
    CrawlPolicy(robots_service=robots).check("https://example.com/about", _context(robots=False))
    robots.allowed_by_robots.assert_called_once_with("https://example.com/about", False)


def test_no_robots_service_allows():
    CrawlPolicy().check("https://example.com/about", _context())


def test_crawl_delay():
    robots = Mock()
    robots.crawl_delay.return_value = 4
    policy = CrawlPolicy(robots_service=robots)
    assert policy.crawl_delay("https://example.com/a", _context()) == 4
    assert policy.crawl_delay("https://example.com/a", _context(robots=False)) == 0
    assert CrawlPolicy().crawl_delay("https://example.com/a", _context()) == 0
