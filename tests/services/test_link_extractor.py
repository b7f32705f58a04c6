from scopecrawl.services.link_extractor import LinkExtractor


HTML = """
<html><head>
  <link rel="alternate" hreflang="de" href="/de/">
  <link rel="stylesheet" href="/style.css">
</head><body>
  <a href="/about">About</a>
  <a href="https://other.com/x">Other</a>
  <a href="#section">Jump</a>
  <a href="mailto:hi@example.com">Mail</a>
  <a href="javascript:void(0)">JS</a>
  <a href="tel:+123">Call</a>
  <a href="">Empty</a>
  <a href="/about">About again</a>
  <div data-href="/cards/1">Card</div>
  <button onclick="window.location.href='/go'">Go</button>
  <span onclick="navigate('/nav')">Nav</span>
</body></html>
"""


def test_extracts_links_in_document_order_without_duplicates():
    links = LinkExtractor().extract_links(HTML, "https://example.com/page")
    assert links == [
        "https://example.com/about",
        "https://other.com/x",
        "https://example.com/de/",
        "https://example.com/cards/1",
        "https://example.com/go",
        "https://example.com/nav",
    ]


def test_skips_non_navigation_schemes_and_fragments():
    links = LinkExtractor().extract_links(HTML, "https://example.com/page")
    assert not any(link.startswith(("mailto:", "javascript:", "tel:")) for link in links)
    assert "https://example.com/page#section" not in links


def test_relative_links_resolve_against_base():
    html = '<a href="child">c</a><a href="../up">u</a>'
    links = LinkExtractor().extract_links(html, "https://example.com/a/b/")
    assert links == ["https://example.com/a/b/child", "https://example.com/a/up"]


def test_empty_html_returns_no_links():
    assert LinkExtractor().extract_links("", "https://example.com") == []
    assert LinkExtractor().extract_links(None, "https://example.com") == []
