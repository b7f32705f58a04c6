"""robots.txt parsing and evaluation.

`RobotsPolicy.parse()` reads a robots.txt document into one `RuleSet` per
user-agent token. `RobotsPolicy.is_allowed()` answers allow/deny queries:

- the rule set for the requested agent is used, falling back to `*`, then to
  an empty rule set;
- allow patterns are checked first and any match allows the URL, whatever
  the disallow patterns say;
- then any matching disallow pattern denies it;
- everything else is allowed.

Anything malformed (a line, a pattern, the URL being checked) fails open.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern
from urllib.parse import urljoin, urlsplit

logger = logging.getLogger(__name__)

WILDCARD_AGENT = "*"
DIRECTIVES = ("user-agent", "allow", "disallow", "crawl-delay", "sitemap")


@dataclass(frozen=True)
class PathPattern:
    """One allow/disallow value and its compiled, start-anchored regex."""

    value: str
    regex: Optional[Pattern[str]]

    @classmethod
    def compile(cls, value: str) -> "PathPattern":
        path = value if value.startswith("/") else "/" + value
        try:
            return cls(value=path, regex=re.compile(_pattern_to_regex(path)))
        except re.error:
            logger.warning("Invalid pattern in robots.txt: %r", value)
            return cls(value=path, regex=None)

    def matches(self, path: str) -> bool:
        if self.regex is None:
            return False
        return self.regex.match(path) is not None


def _pattern_to_regex(path: str) -> str:
    anchored = path.endswith("$")
    if anchored:
        path = path[:-1]
    body = ".*".join(re.escape(part) for part in path.split("*"))
    return "^" + body + ("$" if anchored else "")


@dataclass
class RuleSet:
    allow: List[PathPattern] = field(default_factory=list)
    disallow: List[PathPattern] = field(default_factory=list)
    crawl_delay: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return not self.allow and not self.disallow


class RobotsPolicy:
    """Per-agent robots.txt rules for one origin."""

    def __init__(self):
        self.rules: Dict[str, RuleSet] = {}
        self._sitemaps: List[str] = []

    @classmethod
    def from_text(cls, text: str, base_url: Optional[str] = None) -> "RobotsPolicy":
        policy = cls()
        policy.parse(text, base_url)
        return policy

    @property
    def sitemaps(self) -> List[str]:
        return list(self._sitemaps)

    def _rule_set(self, agent: str) -> RuleSet:
        rule_set = self.rules.get(agent)
        if rule_set is None:
            rule_set = RuleSet()
            self.rules[agent] = rule_set
        return rule_set

    def parse(self, text: str, base_url: Optional[str] = None) -> None:
        if not text:
            return
        # requests keeps a UTF-8 BOM in `.text`.
        text = text.lstrip("\ufeff")

        current_agent = WILDCARD_AGENT
        for lineno, raw_line in enumerate(text.splitlines(), start=1):
            try:
                line = raw_line.split("#", 1)[0].strip()
                if not line:
                    continue
                if ":" not in line:
                    logger.debug("Skipping robots.txt line %d without a directive: %r", lineno, raw_line)
                    continue
                field_name, value = line.split(":", 1)
                field_name = field_name.strip().lower()
                value = value.strip()
                if not value:
                    continue

                if field_name == "user-agent":
                    current_agent = value.lower()
                    self._rule_set(current_agent)
                elif field_name == "allow":
                    self._rule_set(current_agent).allow.append(PathPattern.compile(value))
                elif field_name == "disallow":
                    self._rule_set(current_agent).disallow.append(PathPattern.compile(value))
                elif field_name == "crawl-delay":
                    self._parse_crawl_delay(current_agent, value)
                elif field_name == "sitemap":
                    self._add_sitemap(value, base_url)
                else:
                    logger.debug("Ignoring unknown robots.txt directive %r", field_name)
            except Exception:
                logger.warning("Error parsing robots.txt line %d: %r", lineno, raw_line, exc_info=True)
                continue

    def _parse_crawl_delay(self, agent: str, value: str) -> None:
        try:
            delay = float(value)
        except ValueError:
            logger.debug("Ignoring non-numeric crawl-delay %r", value)
            return
        if delay != delay or delay < 0:
            logger.debug("Ignoring invalid crawl-delay %r", value)
            return
        self._rule_set(agent).crawl_delay = delay

    def _add_sitemap(self, value: str, base_url: Optional[str]) -> None:
        if value.lower().startswith(("http://", "https://")):
            self._sitemaps.append(value)
        elif base_url:
            self._sitemaps.append(urljoin(base_url, value))

    def rules_for(self, user_agent: str = WILDCARD_AGENT) -> RuleSet:
        agent = (user_agent or WILDCARD_AGENT).lower()
        return self.rules.get(agent) or self.rules.get(WILDCARD_AGENT) or RuleSet()

    def is_allowed(self, url: str, user_agent: str = WILDCARD_AGENT) -> bool:
        try:
            parts = urlsplit(url)
            path = parts.path or "/"
            if parts.query:
                path = f"{path}?{parts.query}"

            rule_set = self.rules_for(user_agent)
            if rule_set.is_empty:
                return True

            for pattern in rule_set.allow:
                if pattern.matches(path):
                    return True
            for pattern in rule_set.disallow:
                if pattern.matches(path):
                    return False
            return True
        except Exception:
            logger.warning("Error checking robots.txt permissions for %s", url, exc_info=True)
            return True

    def get_crawl_delay(self, user_agent: str = WILDCARD_AGENT) -> float:
        return self.rules_for(user_agent).crawl_delay or 0
