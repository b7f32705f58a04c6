"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from scopecrawl import config as env
from scopecrawl.services.crawl_executor import CrawlExecutor
from scopecrawl.services.crawl_policy import CrawlPolicy
from scopecrawl.services.crawl_registry import InMemoryCrawlRegistry
from scopecrawl.services.fetcher import HttpServiceFetcher
from scopecrawl.services.fetcher_factory import FetcherFactory
from scopecrawl.services.headless_browser_fetcher import PlaywrightHeadlessFetcher, PlaywrightHeadlessOptions
from scopecrawl.services.http_service import HttpService
from scopecrawl.services.link_extractor import LinkExtractor
from scopecrawl.services.robots_cache import RobotsCache
from scopecrawl.services.robots_service import RobotsService


# Environment variables used by the container (read via `scopecrawl.config` helpers).
#
# Notes:
# - Types are enforced by the helper used (`get_int_env`, `get_float_env`, etc.).
# - Defaults shown here are the effective defaults used when the env var is unset.
# - These are injected into services via `config = providers.Configuration(default=ENV)`.
#
# USER_AGENT (str, default: "Mozilla/5.0 (compatible; ScopeCrawl/1.0)")
#   User-Agent header for page and robots.txt requests.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for outbound HTTP requests. Also reused for the headless fetcher timeout.
#
# CRAWL_DELAY (float seconds, default: 0.1)
#   Politeness delay after each fetch. A larger robots.txt Crawl-delay wins.
#
# DEFAULT_DEPTH (int, default: 1)
#   max_depth for YAML crawl configs that do not set one.
#
# SCOPECRAWL_RESPECT_ROBOTS (bool, default: true)
#   Whether API crawls honor robots.txt when the request does not say.
#
# SCOPECRAWL_ROBOTS_AGENT (str, default: "*")
#   User-agent token looked up in robots.txt groups.
#
# SCOPECRAWL_ROBOTS_CACHE_MAX_SIZE (int, default: 2048)
#   Max number of origins kept in the in-memory robots.txt cache (LRU eviction).
#
# SCOPECRAWL_ROBOTS_CACHE_TTL_SECONDS (int seconds, default: 3600)
#   TTL for robots.txt cache entries. Stale entries are refetched.
#
# SCOPECRAWL_HOST / SCOPECRAWL_PORT (default: 0.0.0.0 / 3000)
#   Bind address for the API server started by run.py.
ENV = {
    "USER_AGENT": env.USER_AGENT,
    "HTTP_TIMEOUT": env.HTTP_TIMEOUT,
    "CRAWL_DELAY": env.CRAWL_DELAY,
    "DEFAULT_DEPTH": env.DEFAULT_DEPTH,
    "SCOPECRAWL_RESPECT_ROBOTS": env.RESPECT_ROBOTS,
    "SCOPECRAWL_ROBOTS_AGENT": env.get_str_env("SCOPECRAWL_ROBOTS_AGENT", "*"),
    "SCOPECRAWL_ROBOTS_CACHE_MAX_SIZE": env.get_int_env("SCOPECRAWL_ROBOTS_CACHE_MAX_SIZE", 2048),
    "SCOPECRAWL_ROBOTS_CACHE_TTL_SECONDS": env.get_int_env("SCOPECRAWL_ROBOTS_CACHE_TTL_SECONDS", 3600),
    "SCOPECRAWL_HOST": env.get_str_env("SCOPECRAWL_HOST", "0.0.0.0"),
    "SCOPECRAWL_PORT": env.get_int_env("SCOPECRAWL_PORT", 3000),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for ScopeCrawl."""

    config = providers.Configuration(default=ENV)

    crawl_registry = providers.Singleton(
        InMemoryCrawlRegistry
    )

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int)
    )

    page_fetcher = providers.Singleton(
        HttpServiceFetcher,
        http_service=http_service,
    )

    headless_fetcher = providers.Singleton(
        PlaywrightHeadlessFetcher,
        user_agent=config.USER_AGENT.as_(str),
        options=providers.Factory(
            PlaywrightHeadlessOptions,
            timeout_ms=providers.Callable(lambda t: t * 1000, config.HTTP_TIMEOUT.as_(int)),
        ),
    )

    fetcher_factory = providers.Singleton(
        FetcherFactory,
        http_fetcher=page_fetcher,
        headless_fetcher=headless_fetcher,
    )

    robots_cache = providers.Singleton(
        RobotsCache,
        max_size=config.SCOPECRAWL_ROBOTS_CACHE_MAX_SIZE.as_(int),
        ttl_seconds=config.SCOPECRAWL_ROBOTS_CACHE_TTL_SECONDS.as_(int),
    )

    robots_service = providers.Singleton(
        RobotsService,
        http_service=http_service,
        robots_agent=config.SCOPECRAWL_ROBOTS_AGENT.as_(str),
        cache=robots_cache,
    )

    crawl_policy = providers.Singleton(
        CrawlPolicy,
        robots_service=robots_service
    )

    link_extractor = providers.Singleton(
        LinkExtractor
    )

    # Factory: executors carry per-crawl state, one per crawl.
    crawl_executor = providers.Factory(
        CrawlExecutor,
        crawl_policy=crawl_policy,
        link_extractor=link_extractor,
        fetcher_factory=fetcher_factory,
        delay_seconds=config.CRAWL_DELAY.as_(float),
    )
