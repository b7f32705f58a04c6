import os
from typing import Optional

import yaml

from scopecrawl import config as env
from scopecrawl.domain.config import CrawlerConfig
from scopecrawl.exceptions import ConfigNotFoundError


class CrawlerConfigParser:
    """Parse a YAML dict into a CrawlerConfig.

    Responsibility: schema/validation for YAML crawl configs. Use
    `load_crawler_config` to read one from disk.
    """

    def __init__(self, default_depth: Optional[int] = None):
        self.default_depth = env.DEFAULT_DEPTH if default_depth is None else default_depth

    def parse(self, *, config_path: str, data: dict) -> CrawlerConfig:
        if not isinstance(data, dict):
            raise ValueError("crawl config must be a mapping")
        seed_url = data.get("seed_url")
        if not seed_url:
            raise ValueError("seed_url is required")

        # fetch: { mode: "static" } or { mode: "headless", headless: { timeout_ms, wait_until } }
        fetch_dict = data.get("fetch") or {}
        fetch_mode = fetch_dict.get("mode", "static")
        headless_options = None
        if fetch_mode == "headless":
            headless_options = fetch_dict.get("headless") or {}

        max_depth = data.get("max_depth", self.default_depth)

        return CrawlerConfig(
            seed_url=seed_url,
            max_depth=max_depth,
            exclusion_rules=data.get("exclusion_rules") or [],
            robots=data.get("robots", env.RESPECT_ROBOTS),
            fetch_mode=fetch_mode,
            delay_seconds=data.get("delay_seconds"),
            headless_options=headless_options,
            name=data.get("name") or os.path.splitext(os.path.basename(config_path))[0],
            config_path=os.path.basename(config_path),
        )


def load_crawler_config(config_path: str, parser: Optional[CrawlerConfigParser] = None) -> CrawlerConfig:
    """Read and parse the YAML crawl config at `config_path`.

    Raises `ConfigNotFoundError` when the file is missing or is not a YAML
    mapping, `ValueError` when its contents are invalid.
    """
    if not os.path.isfile(config_path):
        raise ConfigNotFoundError(config_path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigNotFoundError(config_path, f"could not be read: {e}") from e
    if not isinstance(data, dict):
        raise ConfigNotFoundError(config_path, "is not a YAML mapping")
    parser = parser if parser is not None else CrawlerConfigParser()
    return parser.parse(config_path=config_path, data=data)
