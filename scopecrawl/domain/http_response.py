from typing import NamedTuple, Optional


class HttpResponse(NamedTuple):
    """Response from a page fetch (static HTTP or headless browser)."""
    status_code: int
    text: str
    content_type: Optional[str] = None
    final_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= int(self.status_code) < 300
