from typing import Optional

from fastapi import APIRouter, HTTPException

from scopecrawl.services.crawl_registry import InMemoryCrawlRegistry


def create_crawls_router(crawl_registry: Optional[InMemoryCrawlRegistry] = None):
    """Observe and cancel crawls started through `/api/crawl`."""
    router = APIRouter(prefix="/crawls", tags=["Crawls"])

    @router.get("/active")
    def list_active_crawls():
        if crawl_registry is None:
            return {"active": []}
        return {"active": crawl_registry.list_active()}

    @router.get("/active/{crawl_id}")
    def get_crawl(crawl_id: str):
        if crawl_registry is None:
            raise HTTPException(status_code=404, detail="no registry configured")
        rec = crawl_registry.get(crawl_id)
        if not rec:
            raise HTTPException(status_code=404, detail="crawl not found")
        return rec

    @router.post("/cancel/{crawl_id}")
    def cancel_crawl(crawl_id: str):
        if crawl_registry is None:
            raise HTTPException(status_code=404, detail="no registry configured")
        if not crawl_registry.cancel(crawl_id):
            raise HTTPException(status_code=404, detail="crawl not found or cannot cancel")
        return {"status": "cancelling", "crawl_id": crawl_id}

    return router
