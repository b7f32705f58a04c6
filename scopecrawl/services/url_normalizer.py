"""URL normalization and host scoping helpers.

`normalize()` turns a URL string into the canonical form used as the crawl
deduplication key. Rules are applied in this order:

1. parse as an absolute http(s) URL, resolving against `base` when relative
2. drop the fragment
3. drop tracking query parameters (exact names plus prefix/substring heuristics)
4. drop trailing slashes from the path
5. drop default ports (`:80` for http, `:443` for https)
6. upgrade `http` to `https`

The function is pure: no network access, and `normalize(normalize(u)) ==
normalize(u)` for every URL it accepts.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import unquote_plus, urljoin, urlsplit, urlunsplit

from scopecrawl.exceptions import InvalidUrl


ALLOWED_SCHEMES = ("http", "https")

TRACKING_QUERY_PARAMS = frozenset(
    p.lower()
    for p in (
        # UTM
        "utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content", "utm_id",
        # social
        "fbclid", "igshid", "twclid",
        # Google Analytics / Ads
        "_ga", "gclid", "gclsrc", "_gl",
        # Microsoft / Bing
        "msclkid",
        # Mailchimp
        "mc_eid", "mc_cid",
        # generic campaign tagging
        "ref", "source", "campaign", "medium", "term", "content",
        # HubSpot
        "_hsenc", "_hsmi", "hsa_acc", "hsa_cam", "hsa_grp", "hsa_ad", "hsa_src",
        "hsa_tgt", "hsa_kw", "hsa_mt", "hsa_net", "hsa_ver",
        # misc
        "mkt_tok", "trk", "linkId", "oeid", "sid", "cid", "eid", "_ke",
        "tracking_id", "track", "tracking", "click_id", "click", "affiliate_id", "aff_id",
    )
)
TRACKING_QUERY_PARAM_PREFIXES = ("utm_", "hsa_", "_")
TRACKING_QUERY_PARAM_SUBSTRINGS = ("tracking", "click", "affiliate")


def is_tracking_param(key: str) -> bool:
    normalized = key.strip().lower()
    if not normalized:
        return False
    if normalized in TRACKING_QUERY_PARAMS:
        return True
    if normalized.startswith(TRACKING_QUERY_PARAM_PREFIXES):
        return True
    return any(s in normalized for s in TRACKING_QUERY_PARAM_SUBSTRINGS)


def _has_default_port(scheme: str, port: Optional[int]) -> bool:
    if port is None:
        return False
    return (scheme == "http" and port == 80) or (scheme == "https" and port == 443)


def _strip_tracking_params(query: str) -> str:
    # Work on the raw `k=v` pieces so surviving parameters keep their exact encoding.
    kept = []
    for piece in query.split("&"):
        if not piece:
            continue
        key = unquote_plus(piece.split("=", 1)[0])
        if is_tracking_param(key):
            continue
        kept.append(piece)
    return "&".join(kept)


def _split_absolute(url: str):
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise InvalidUrl(url, f"Invalid URL format: {e}") from e
    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES or not parts.hostname:
        raise InvalidUrl(url)
    return parts, scheme, port


def normalize(url: str, base: Optional[str] = None) -> str:
    """Return the canonical form of `url`.

    Raises `InvalidUrl` if `url` (resolved against `base` when given) is not
    an absolute http(s) URL with a host.
    """
    if url is None:
        raise InvalidUrl(url)
    raw = str(url).strip()
    if not raw:
        raise InvalidUrl(url)
    if base:
        try:
            raw = urljoin(base, raw)
        except ValueError as e:
            raise InvalidUrl(url, f"Invalid URL format: {e}") from e

    parts, original_scheme, port = _split_absolute(raw)

    scheme = "https" if original_scheme == "http" else original_scheme
    if _has_default_port(original_scheme, port) or _has_default_port(scheme, port):
        port = None

    host = parts.hostname.lower()
    if ":" in host:
        host = f"[{host}]"
    userinfo = ""
    if parts.username:
        userinfo = parts.username
        if parts.password:
            userinfo += ":" + parts.password
        userinfo += "@"
    netloc = f"{userinfo}{host}:{port}" if port is not None else f"{userinfo}{host}"

    path = parts.path.rstrip("/")
    query = _strip_tracking_params(parts.query)

    return urlunsplit((scheme, netloc, path, query, ""))


def is_valid_seed_url(url: str) -> bool:
    """True if `url` is an absolute http(s) URL with a host."""
    if not url or not str(url).strip():
        return False
    try:
        _split_absolute(str(url).strip())
    except InvalidUrl:
        return False
    return True


def site_host(url: str) -> str:
    """Lower-cased hostname of `url` without a leading `www.`; empty if unparseable."""
    try:
        host = (urlsplit(url).hostname or "").strip(".").lower()
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


def is_same_host(url: str, host: str) -> bool:
    """True if `url` belongs to `host` (as returned by `site_host`)."""
    candidate = site_host(url)
    return bool(candidate) and candidate == host
