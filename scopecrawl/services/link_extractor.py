import logging
import re
from typing import Callable, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

SKIP_HREF_SCHEMES = re.compile(r"^(javascript|data|mailto|tel|ftp|file):", re.IGNORECASE)
ONCLICK_PATTERNS = (
    re.compile(r"""window\.location(?:\.href)?\s*=\s*['"]([^'"]+)['"]"""),
    re.compile(r"""location(?:\.href)?\s*=\s*['"]([^'"]+)['"]"""),
    re.compile(r"""navigate\(['"]([^'"]+)['"]\)"""),
    re.compile(r"""href\s*=\s*['"]([^'"]+)['"]"""),
)


class LinkExtractor:
    """Pull candidate navigation URLs out of an HTML page.

    Looks at `<a href>`, `<link rel="alternate" href>`, `data-href`
    attributes and common `onclick` navigation snippets. Returned URLs are
    absolute (resolved against `base_url`) but not normalized.
    """

    def __init__(self, parser_fn: Optional[Callable[[str], BeautifulSoup]] = None):
        self._parse = parser_fn or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract_links(self, html: str, base_url: str) -> list[str]:
        if not html:
            logger.debug("No HTML content to parse for %s", base_url)
            return []

        soup = self._parse(html)
        found: dict[str, None] = {}

        def add(raw: Optional[str]) -> None:
            if not raw:
                return
            candidate = raw.strip()
            if not candidate or candidate.startswith("#") or SKIP_HREF_SCHEMES.match(candidate):
                return
            try:
                found[urljoin(base_url, candidate)] = None
            except ValueError:
                logger.debug("Skipping unparseable link %r on %s", candidate, base_url)

        for a in soup.find_all("a", href=True):
            add(a.get("href"))
        for link in soup.find_all("link", href=True):
            rel = link.get("rel") or []
            if "alternate" in [r.lower() for r in rel]:
                add(link.get("href"))
        for el in soup.find_all(attrs={"data-href": True}):
            add(el.get("data-href"))
        for el in soup.find_all(attrs={"onclick": True}):
            onclick = el.get("onclick") or ""
            for pattern in ONCLICK_PATTERNS:
                m = pattern.search(onclick)
                if m:
                    add(m.group(1))

        logger.debug("Found %d unique URLs on page %s", len(found), base_url)
        return list(found)
