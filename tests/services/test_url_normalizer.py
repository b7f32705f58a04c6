import pytest

from scopecrawl.exceptions import InvalidUrl
from scopecrawl.services.url_normalizer import (
    is_same_host,
    is_tracking_param,
    is_valid_seed_url,
    normalize,
    site_host,
)


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com",
        "http://Example.COM:80/a/b/?utm_source=x&id=3#frag",
        "https://example.com/path//?q=a%20b&fbclid=1",
        "https://user:pw@example.com:8443/x/",
        "http://[::1]:8080/",
    ],
)
def test_normalize_is_idempotent(url):
    once = normalize(url)
    assert normalize(once) == once


def test_tracking_params_are_stripped():
    assert normalize("https://x.com/a?utm_source=y") == normalize("https://x.com/a")


def test_remaining_params_keep_order_and_encoding():
    url = "https://x.com/a?b=2&utm_medium=mail&a=1&q=hello%20world&gclid=abc"
    assert normalize(url) == "https://x.com/a?b=2&a=1&q=hello%20world"


def test_tracking_heuristics():
    assert is_tracking_param("utm_whatever")
    assert is_tracking_param("hsa_foo")
    assert is_tracking_param("_private")
    assert is_tracking_param("myClickRef")
    assert is_tracking_param("LinkId")
    assert not is_tracking_param("page")
    assert not is_tracking_param("")


def test_http_default_port_and_trailing_slash_collapse():
    assert normalize("http://x.com:80/a/") == normalize("https://x.com/a")
    assert normalize("http://x.com:80/a/") == "https://x.com/a"


def test_https_default_port_dropped():
    assert normalize("https://x.com:443/") == "https://x.com"


def test_non_default_port_kept():
    assert normalize("http://x.com:8080/a") == "https://x.com:8080/a"


def test_root_path_becomes_empty_and_fragment_dropped():
    assert normalize("https://Example.com/#top") == "https://example.com"


def test_relative_url_resolved_against_base():
    assert normalize("../about/", base="https://example.com/blog/post") == "https://example.com/about"


@pytest.mark.parametrize("url", ["not-a-url", "", "   ", "ftp://example.com/file", "mailto:a@b.com", "https://"])
def test_invalid_urls_raise(url):
    with pytest.raises(InvalidUrl):
        normalize(url)


def test_invalid_url_carries_reason():
    with pytest.raises(InvalidUrl) as exc:
        normalize("not-a-url")
    assert exc.value.reason == "Invalid URL format"
    assert exc.value.url == "not-a-url"


def test_is_valid_seed_url():
    assert is_valid_seed_url("https://example.com")
    assert is_valid_seed_url("http://example.com/path?x=1")
    assert not is_valid_seed_url("not-a-url")
    assert not is_valid_seed_url("")
    assert not is_valid_seed_url(None)
    assert not is_valid_seed_url("javascript:alert(1)")


def test_site_host_ignores_www_and_case():
    assert site_host("https://WWW.Example.com/a") == "example.com"
    assert site_host("not a url") == ""


def test_is_same_host():
    host = site_host("https://example.com")
    assert is_same_host("https://www.example.com/about", host)
    assert not is_same_host("https://other.com", host)
    assert not is_same_host("https://blog.example.com", host)
    assert not is_same_host("garbage", host)
