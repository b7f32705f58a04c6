import pytest

from scopecrawl.exceptions import ConfigNotFoundError
from scopecrawl.services.crawler_config_parser import CrawlerConfigParser, load_crawler_config


def test_parse_full_config():
    data = {
        "seed_url": "https://example.com",
        "max_depth": 3,
        "exclusion_rules": ["/blog", "/tag/i"],
        "robots": False,
        "fetch": {"mode": "headless", "headless": {"timeout_ms": 5000, "wait_until": "load"}},
        "delay_seconds": 1.5,
    }
    cfg = CrawlerConfigParser(default_depth=1).parse(config_path="configs/example.yml", data=data)
    assert cfg.seed_url == "https://example.com"
    assert cfg.max_depth == 3
    assert cfg.exclusion_rules == ("/blog", "/tag/i")
    assert cfg.robots is False
    assert cfg.fetch_mode == "headless"
    assert cfg.headless_options == {"timeout_ms": 5000, "wait_until": "load"}
    assert cfg.delay_seconds == 1.5
    assert cfg.name == "example"
    assert cfg.config_path == "example.yml"


def test_defaults_apply():
    cfg = CrawlerConfigParser(default_depth=2).parse(config_path="x.yml", data={"seed_url": "https://example.com"})
    assert cfg.max_depth == 2
    assert cfg.fetch_mode == "static"
    assert cfg.headless_options == {}


def test_missing_seed_url_is_invalid():
    with pytest.raises(ValueError, match="seed_url"):
        CrawlerConfigParser().parse(config_path="x.yml", data={"max_depth": 1})


def test_load_from_disk(tmp_path):
    path = tmp_path / "site.yml"
    path.write_text("seed_url: https://example.com\nmax_depth: 0\nexclusion_rules:\n  - /private\n")
    cfg = load_crawler_config(str(path))
    assert cfg.max_depth == 0
    assert cfg.exclusion_rules == ("/private",)
    assert cfg.name == "site"


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigNotFoundError):
        load_crawler_config(str(tmp_path / "missing.yml"))


def test_load_non_mapping(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigNotFoundError, match="not a YAML mapping"):
        load_crawler_config(str(path))


def test_load_numeric_rule_from_yaml(tmp_path):
    path = tmp_path / "years.yml"
    path.write_text("seed_url: https://example.com\nexclusion_rules: [2024]\n")
    cfg = load_crawler_config(str(path))
    assert cfg.exclusion_rules == ("2024",)
