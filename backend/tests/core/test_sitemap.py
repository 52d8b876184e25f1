"""Sitemap builders — tests for standard and news sitemap XML.

Tests cover:
    - static pages always listed, articles after them
    - lastmod prefers updated_at
    - news sitemap keeps only articles inside the window
    - titles and URLs XML-escaped
"""

from datetime import datetime, timedelta, timezone
from xml.etree import ElementTree

from kontekst.core.sitemap import (
    STATIC_PAGES, SitemapArticle, build_news_sitemap, build_sitemap, recent_articles,
)

SITE = "https://kontekst.example"
NOW = datetime(2026, 4, 20, 12, 0, tzinfo=timezone.utc)
NS = {"s": "http://www.sitemaps.org/schemas/sitemap/0.9",
      "news": "http://www.google.com/schemas/sitemap-news/0.9"}


def _article(slug, hours_ago, **kwargs):
    return SitemapArticle(
        slug=slug, title=kwargs.pop("title", slug.title()),
        published_at=NOW - timedelta(hours=hours_ago), **kwargs,
    )


# ─── standard ────────────────────────────────────────────────────

def test_standard_sitemap_lists_static_pages_then_articles():
    xml = build_sitemap(SITE, [_article("first", 1), _article("second", 100)])
    root = ElementTree.fromstring(xml)
    locs = [el.text for el in root.findall("s:url/s:loc", NS)]
    assert locs[: len(STATIC_PAGES)] == [SITE + path for path, _, _ in STATIC_PAGES]
    assert locs[len(STATIC_PAGES):] == [f"{SITE}/article/first", f"{SITE}/article/second"]


def test_lastmod_prefers_updated_at():
    updated = NOW - timedelta(minutes=5)
    xml = build_sitemap(SITE, [_article("a", 10, updated_at=updated)])
    assert f"<lastmod>{updated.isoformat()}</lastmod>" in xml


def test_article_without_dates_has_no_lastmod():
    xml = build_sitemap(SITE, [SitemapArticle(slug="undated", title="U", published_at=None)])
    assert "<lastmod>" not in xml


# ─── news ────────────────────────────────────────────────────────

def test_recent_articles_window():
    articles = [_article("fresh", 3), _article("edge", 48), _article("stale", 49)]
    kept = recent_articles(articles, NOW, timedelta(days=2))
    assert [a.slug for a in kept] == ["fresh", "edge"]


def test_news_sitemap_excludes_old_and_undated():
    articles = [
        _article("fresh", 3),
        _article("stale", 72),
        SitemapArticle(slug="undated", title="U", published_at=None),
    ]
    xml = build_news_sitemap(SITE, "Kontekst", articles, NOW)
    root = ElementTree.fromstring(xml)
    assert [el.text for el in root.findall("s:url/s:loc", NS)] == [f"{SITE}/article/fresh"]
    assert root.find("s:url/news:news/news:publication/news:name", NS).text == "Kontekst"


def test_news_titles_escaped():
    xml = build_news_sitemap(SITE, "Kontekst", [_article("a", 1, title="Oil & <Gas>")], NOW)
    assert "<news:title>Oil &amp; &lt;Gas&gt;</news:title>" in xml
    ElementTree.fromstring(xml)


def test_news_image_included_when_present():
    xml = build_news_sitemap(
        SITE, "Kontekst", [_article("a", 1, image_url="https://cdn.example/a.jpg")], NOW,
    )
    assert "<image:loc>https://cdn.example/a.jpg</image:loc>" in xml
