import logging
from typing import Callable, List, Optional, Union

from fastapi import APIRouter
from pydantic import BaseModel
from starlette.responses import JSONResponse

from scopecrawl.domain.config import FETCH_MODES, CrawlerConfig
from scopecrawl.domain.crawl_session import CrawlSession
from scopecrawl.exceptions import CrawlError
from scopecrawl.services.crawl_registry import InMemoryCrawlRegistry
from scopecrawl.services.reporter import LoggingReporter, MultiReporter
from scopecrawl.services.url_normalizer import is_valid_seed_url

logger = logging.getLogger(__name__)


class CrawlRequest(BaseModel):
    url: Optional[str] = None
    maxDepth: Optional[int] = None
    exclusionRules: Optional[Union[str, List[str]]] = None
    respectRobots: Optional[bool] = None
    renderMode: Optional[str] = None


class FetchRequest(BaseModel):
    url: Optional[str] = None
    respectRobots: Optional[bool] = None
    renderMode: Optional[str] = None


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _render_mode(value: Optional[str]) -> Optional[str]:
    mode = (value or "static").strip().lower()
    return mode if mode in FETCH_MODES else None


def create_crawl_router(
    executor_factory: Callable,
    robots_service,
    fetcher_factory,
    crawl_registry: Optional[InMemoryCrawlRegistry] = None,
    respect_robots_default: bool = True,
):
    """Crawl invocation surface: run a crawl, check robots.txt, fetch a single page.

    Handlers are sync so FastAPI runs them in its threadpool; a crawl blocks
    only its own request.
    """
    router = APIRouter(tags=["Crawl"])

    @router.post("/api/crawl")
    def crawl(req: CrawlRequest):
        if not req.url:
            return _error(400, "URL is required")
        if not is_valid_seed_url(req.url):
            return _error(400, "Invalid URL format")
        if req.maxDepth is not None and req.maxDepth < 0:
            return _error(400, "maxDepth must be >= 0")
        mode = _render_mode(req.renderMode)
        if mode is None:
            return _error(400, f"Unknown renderMode: {req.renderMode}")

        robots = respect_robots_default if req.respectRobots is None else req.respectRobots
        cfg = CrawlerConfig(
            seed_url=req.url,
            max_depth=req.maxDepth,
            exclusion_rules=req.exclusionRules,
            robots=robots,
            fetch_mode=mode,
        )

        session = CrawlSession(cfg.seed_url, registry=crawl_registry)
        session.start_tracking()
        try:
            executor = executor_factory()
            report = executor.crawl_config(
                cfg,
                stop_event=session.stop_event,
                reporter=MultiReporter([session, LoggingReporter()]),
            )
        except Exception as e:
            logger.exception("Crawl of %s failed", cfg.seed_url)
            session.finish_tracking(error=str(e) or type(e).__name__)
            return _error(500, "Crawl failed", status="error")
        session.finish_tracking(report)

        return {"status": "success", "crawlId": session.crawl_id, **report.to_dict()}

    @router.get("/api/check-robots")
    def check_robots(url: Optional[str] = None):
        if not url:
            return _error(400, "URL is required")
        if not is_valid_seed_url(url):
            return _error(400, "Invalid URL format")
        return {"allowed": robots_service.allowed_by_robots(url)}

    @router.post("/fetch")
    def fetch(req: FetchRequest):
        if not req.url:
            return _error(400, "URL is required", html=None)
        if not is_valid_seed_url(req.url):
            return _error(400, "Invalid URL format", html=None)
        mode = _render_mode(req.renderMode)
        if mode is None:
            return _error(400, f"Unknown renderMode: {req.renderMode}", html=None)

        if req.respectRobots and not robots_service.allowed_by_robots(req.url):
            return _error(403, "Access denied by robots.txt", html=None)

        try:
            response = fetcher_factory.get(mode).fetch(req.url)
        except CrawlError as e:
            logger.warning("Fetch of %s failed: %s", req.url, e)
            return _error(500, e.reason, html=None)
        except Exception:
            logger.exception("Fetch of %s failed", req.url)
            return _error(500, "Failed to fetch page", html=None)

        return {
            "html": response.text,
            "finalUrl": response.final_url or req.url,
            "dynamicContent": mode == "headless",
        }

    return router
