"""User exclusion rules and built-in non-document filters.

Rules are parsed once into a `RegexRule` or a `PathRule`:

- `/pattern/flags` (leading slash, trailing slash followed only by flag
  letters) is a regular expression searched in the lower-cased full URL.
- anything else is a path rule: `blog` (or `/blog`) matches the path
  `/blog` and everything below `/blog/`, but not `/blogroll`.

A malformed rule is logged and dropped; it never stops other rules from
matching.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Sequence, Union
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


NON_DOCUMENT_EXTENSIONS = (
    # stylesheets, scripts, data
    ".css", ".js", ".json", ".xml", ".map",
    # images
    ".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico",
    # documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx",
    # archives, binaries
    ".zip", ".rar", ".tar", ".gz", ".exe",
    # media
    ".mp3", ".mp4", ".avi", ".mov",
    # fonts
    ".woff", ".woff2", ".ttf", ".eot",
)
DOWNLOAD_MARKERS = ("download=", ".download", "attachment=", "format=")

# Flag letters are limited to the ones a regex literal can carry, so a path
# rule such as `/docs/api` is not mistaken for the regex `docs` with flags `api`.
_REGEX_RULE_SHAPE = re.compile(r"^/.+/[gimsuxy]*$", re.DOTALL)
_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}
# JavaScript-only flags with no effect on a single search.
_IGNORED_FLAGS = frozenset("guy")


class InvalidRuleError(ValueError):
    """Raised by `parse_rule` for a rule that cannot be compiled."""


@dataclass(frozen=True)
class RegexRule:
    source: str
    pattern: str
    flags: str
    compiled: Pattern[str]

    def matches(self, url: str) -> bool:
        return self.compiled.search(url.lower()) is not None


@dataclass(frozen=True)
class PathRule:
    source: str
    segments: tuple[str, ...]
    compiled: Pattern[str]
    fallback: Pattern[str]

    @property
    def prefix(self) -> str:
        return "/" + "/".join(self.segments)

    def matches(self, url: str) -> bool:
        try:
            path = urlsplit(url).path
        except ValueError:
            logger.debug("Could not parse path of %s; using substring match for rule %r", url, self.source)
            return self.fallback.search(url.lower()) is not None
        path = path.lower()
        if path.endswith("/"):
            path = path[:-1]
        return self.compiled.match(path) is not None


Rule = Union[RegexRule, PathRule]


def _compile_flags(flag_letters: str) -> int:
    flags = 0
    for letter in flag_letters:
        if letter in _IGNORED_FLAGS:
            continue
        if letter not in _REGEX_FLAGS:
            raise InvalidRuleError(f"unsupported regex flag {letter!r}")
        flags |= _REGEX_FLAGS[letter]
    return flags


def parse_rule(rule: str) -> Optional[Rule]:
    """Parse one exclusion rule. Returns None for blank rules.

    Raises `InvalidRuleError` if the rule cannot be compiled.
    """
    stripped = (rule or "").strip()
    if not stripped:
        return None

    # Pattern text keeps its case: `\D` and `\d` differ.
    if len(stripped) > 2 and _REGEX_RULE_SHAPE.match(stripped):
        last_slash = stripped.rindex("/")
        pattern = stripped[1:last_slash]
        flag_letters = stripped[last_slash + 1:]
        try:
            compiled = re.compile(pattern, _compile_flags(flag_letters))
        except re.error as e:
            raise InvalidRuleError(f"invalid regular expression {pattern!r}: {e}") from e
        return RegexRule(source=rule, pattern=pattern, flags=flag_letters, compiled=compiled)

    body = stripped.lower().strip("/")
    if not body:
        raise InvalidRuleError("path rule has no segments")
    segments = tuple(s for s in body.split("/") if s)
    escaped = re.escape("/".join(segments))
    return PathRule(
        source=rule,
        segments=segments,
        compiled=re.compile(rf"^/{escaped}(?:/.*)?$", re.DOTALL),
        fallback=re.compile(rf"/{escaped}(?:/|$)"),
    )


def parse_rules(rules: Iterable[str]) -> list[Rule]:
    """Parse all rules, skipping (and logging) malformed ones."""
    parsed: list[Rule] = []
    for rule in rules or ():
        try:
            r = parse_rule(rule)
        except InvalidRuleError as e:
            logger.warning("Skipping malformed exclusion rule %r: %s", rule, e)
            continue
        if r is not None:
            parsed.append(r)
    return parsed


def builtin_exclusion_reason(url: str) -> Optional[str]:
    """Return a reason if `url` points at a non-document resource."""
    url_lower = url.lower()
    try:
        path = urlsplit(url_lower).path
    except ValueError:
        path = url_lower
    for ext in NON_DOCUMENT_EXTENSIONS:
        if path.endswith(ext):
            return f"non-document extension {ext}"
    for marker in DOWNLOAD_MARKERS:
        if marker in url_lower:
            return f"download marker {marker}"
    return None


class ExclusionMatcher:
    """Compiled set of exclusion rules plus the built-in filters."""

    def __init__(self, rules: Sequence[str] = ()):
        self.rules: list[Rule] = parse_rules(rules)

    def match(self, url: str) -> Optional[str]:
        """Return the first matching rule description, or None."""
        reason = builtin_exclusion_reason(url)
        if reason is not None:
            logger.debug("Excluding %s: %s", url, reason)
            return reason
        for rule in self.rules:
            try:
                matched = rule.matches(url)
            except Exception:
                logger.warning("Error evaluating exclusion rule %r against %s", rule.source, url, exc_info=True)
                continue
            if matched:
                logger.debug("Excluding %s: matched rule %r", url, rule.source)
                return rule.source
        return None

    def should_exclude(self, url: str) -> bool:
        return self.match(url) is not None


def should_exclude(url: str, rules: Sequence[str]) -> bool:
    return ExclusionMatcher(rules).should_exclude(url)
