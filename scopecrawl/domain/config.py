from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


FETCH_MODES = ("static", "headless")


@dataclass(frozen=True)
class CrawlerConfigMetadata:
    """Where a crawler configuration came from."""

    name: Optional[str] = None
    config_path: Optional[str] = None


@dataclass(frozen=True)
class CrawlerConfigData:
    """Crawl-behavior fields for a crawler configuration."""

    seed_url: str
    max_depth: Optional[int]
    exclusion_rules: tuple[str, ...]
    robots: bool
    fetch_mode: str
    delay_seconds: Optional[float] = None
    headless_options: dict[str, Any] = field(default_factory=dict)


class CrawlerConfig:
    """Configuration record composed of metadata + crawl settings.

    `max_depth=None` means unbounded depth. `delay_seconds=None` defers to the
    executor's default politeness delay.
    """

    def __init__(
        self,
        seed_url: str,
        max_depth: Optional[int] = None,
        exclusion_rules=None,
        robots: bool = True,
        fetch_mode: str = "static",
        delay_seconds: Optional[float] = None,
        headless_options: Optional[dict] = None,
        name: Optional[str] = None,
        config_path: Optional[str] = None,
    ):
        if fetch_mode is None or (isinstance(fetch_mode, str) and fetch_mode.strip() == ""):
            raise ValueError("fetch_mode is required")
        mode = fetch_mode.strip().lower()
        if mode not in FETCH_MODES:
            raise ValueError(f"Unknown fetch_mode: {fetch_mode!r}")
        if max_depth is not None:
            max_depth = int(max_depth)
            if max_depth < 0:
                raise ValueError("max_depth must be >= 0")

        if isinstance(exclusion_rules, str):
            exclusion_rules = exclusion_rules.splitlines()
        # YAML turns rules such as `2024` into ints.
        rules = tuple(
            str(r).strip() for r in (exclusion_rules or []) if r is not None and str(r).strip()
        )

        self.meta = CrawlerConfigMetadata(name=name, config_path=config_path)
        self.data = CrawlerConfigData(
            seed_url=(seed_url or "").strip(),
            max_depth=max_depth,
            exclusion_rules=rules,
            robots=bool(robots),
            fetch_mode=mode,
            delay_seconds=float(delay_seconds) if delay_seconds is not None else None,
            headless_options=dict(headless_options or {}),
        )

    @property
    def name(self) -> Optional[str]:
        return self.meta.name

    @property
    def config_path(self) -> Optional[str]:
        return self.meta.config_path

    @property
    def seed_url(self) -> str:
        return self.data.seed_url

    @property
    def max_depth(self) -> Optional[int]:
        return self.data.max_depth

    @property
    def exclusion_rules(self) -> tuple[str, ...]:
        return self.data.exclusion_rules

    @property
    def robots(self) -> bool:
        return self.data.robots

    @property
    def fetch_mode(self) -> str:
        return self.data.fetch_mode

    @property
    def delay_seconds(self) -> Optional[float]:
        return self.data.delay_seconds

    @property
    def headless_options(self) -> dict:
        return self.data.headless_options

    def __repr__(self):
        return f"<CrawlerConfig seed={self.seed_url} max_depth={self.max_depth} mode={self.fetch_mode}>"
