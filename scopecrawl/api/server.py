from fastapi import FastAPI

from scopecrawl.api.routers import create_crawl_router, create_crawls_router, create_systems_router
from scopecrawl.container import ENV


def create_app(container) -> FastAPI:
    """Build the FastAPI app from the providers in `container`."""
    app = FastAPI(title="ScopeCrawl", description="Bounded, domain-scoped web crawler")
    crawl_registry = container.crawl_registry()

    app.include_router(
        create_crawl_router(
            executor_factory=container.crawl_executor,
            robots_service=container.robots_service(),
            fetcher_factory=container.fetcher_factory(),
            crawl_registry=crawl_registry,
            respect_robots_default=bool(container.config.SCOPECRAWL_RESPECT_ROBOTS()),
        )
    )
    app.include_router(create_crawls_router(crawl_registry))
    app.include_router(create_systems_router(ENV, crawl_registry))
    return app
