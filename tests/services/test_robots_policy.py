import logging

from scopecrawl.services.robots_policy import PathPattern, RobotsPolicy


def test_allow_wins_over_disallow():
    policy = RobotsPolicy.from_text("User-agent: *\nDisallow: /a\nAllow: /a/b\n", "https://example.com")
    assert policy.is_allowed("https://example.com/a/b")
    assert not policy.is_allowed("https://example.com/a/c")
    assert policy.is_allowed("https://example.com/other")


def test_empty_text_allows_everything():
    policy = RobotsPolicy.from_text("", "https://example.com")
    assert policy.is_allowed("https://example.com/anything")
    assert policy.rules == {}


def test_comments_blank_lines_and_empty_values_are_skipped():
    text = """
# full line comment
User-agent: *   # trailing comment
Disallow:
Disallow: /private # keep out
no directive here
"""
    policy = RobotsPolicy.from_text(text, "https://example.com")
    rules = policy.rules_for("*")
    assert [p.value for p in rules.disallow] == ["/private"]
    assert not policy.is_allowed("https://example.com/private/x")


def test_field_names_are_case_insensitive_and_paths_keep_case():
    policy = RobotsPolicy.from_text("USER-AGENT: *\nDISALLOW: /Admin\n")
    assert not policy.is_allowed("https://example.com/Admin")
    assert policy.is_allowed("https://example.com/admin")


def test_agent_specific_rules_fall_back_to_wildcard():
    text = "User-agent: GoodBot\nDisallow: /bots-only\n\nUser-agent: *\nDisallow: /\n"
    policy = RobotsPolicy.from_text(text)
    assert policy.is_allowed("https://example.com/page", "goodbot")
    assert policy.is_allowed("https://example.com/page", "GoodBot")
    assert not policy.is_allowed("https://example.com/bots-only", "goodbot")
    assert not policy.is_allowed("https://example.com/page", "otherbot")
    assert not policy.is_allowed("https://example.com/page")


def test_unknown_agent_without_wildcard_group_is_allowed():
    policy = RobotsPolicy.from_text("User-agent: somebot\nDisallow: /\n")
    assert policy.is_allowed("https://example.com/page", "otherbot")


def test_wildcards_and_end_anchor():
    policy = RobotsPolicy.from_text("User-agent: *\nDisallow: /*.php$\nDisallow: /search*q=\n")
    assert not policy.is_allowed("https://example.com/index.php")
    assert policy.is_allowed("https://example.com/index.php?x=1")
    assert not policy.is_allowed("https://example.com/search/?q=test")


def test_query_string_is_part_of_checked_path():
    policy = RobotsPolicy.from_text("User-agent: *\nDisallow: /list?sort=\n")
    assert not policy.is_allowed("https://example.com/list?sort=asc")
    assert policy.is_allowed("https://example.com/list")


def test_value_without_leading_slash_is_coerced():
    pattern = PathPattern.compile("private")
    assert pattern.value == "/private"
    assert pattern.matches("/private/data")


def test_regex_metacharacters_are_literal():
    policy = RobotsPolicy.from_text("User-agent: *\nDisallow: /a.b\n")
    assert not policy.is_allowed("https://example.com/a.b")
    assert policy.is_allowed("https://example.com/axb")


def test_crawl_delay():
    policy = RobotsPolicy.from_text("User-agent: *\nCrawl-delay: 2.5\n\nUser-agent: slowbot\nCrawl-delay: 10\n")
    assert policy.get_crawl_delay() == 2.5
    assert policy.get_crawl_delay("slowbot") == 10
    assert policy.get_crawl_delay("unknown") == 2.5


def test_invalid_crawl_delay_is_ignored():
    policy = RobotsPolicy.from_text("User-agent: *\nCrawl-delay: soon\nCrawl-delay: -3\n")
    assert policy.get_crawl_delay() == 0


def test_sitemaps_absolute_and_relative():
    text = "Sitemap: https://cdn.example.com/sitemap.xml\nSitemap: /sitemap-news.xml\n"
    policy = RobotsPolicy.from_text(text, "https://example.com")
    assert policy.sitemaps == [
        "https://cdn.example.com/sitemap.xml",
        "https://example.com/sitemap-news.xml",
    ]


def test_unknown_directives_are_ignored(caplog):
    caplog.set_level(logging.DEBUG)
    policy = RobotsPolicy.from_text("User-agent: *\nHost: example.com\nDisallow: /x\n")
    assert not policy.is_allowed("https://example.com/x")
    assert "Ignoring unknown robots.txt directive" in caplog.text


def test_malformed_url_fails_open():
    policy = RobotsPolicy.from_text("User-agent: *\nDisallow: /\n")
    assert policy.is_allowed("http://[invalid")


def test_leading_byte_order_mark_is_ignored():
    policy = RobotsPolicy.from_text("\ufeffUser-agent: googlebot\nDisallow: /\n", "https://example.com")
    assert list(policy.rules) == ["googlebot"]
    assert policy.is_allowed("https://example.com/page")
    assert not policy.is_allowed("https://example.com/page", "googlebot")
