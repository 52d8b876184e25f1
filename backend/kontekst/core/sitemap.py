"""Sitemap builders — standard and Google News XML from published article rows.

Invariants:
    - Output is PURE text: no IO, `now` is passed in
    - Every interpolated value is XML-escaped
    - News sitemap includes only articles with published_at >= now - window
    - Articles without published_at are skipped in the news sitemap
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from xml.sax.saxutils import escape as xml_escape

from kontekst.core.clock import ensure_utc

STATIC_PAGES: tuple[tuple[str, str, str], ...] = (
    ("/", "1.0", "hourly"),
    ("/news", "0.9", "hourly"),
    ("/analytics", "0.8", "daily"),
    ("/opinions", "0.8", "daily"),
    ("/about", "0.5", "monthly"),
    ("/contact", "0.5", "monthly"),
)

_URLSET = '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
_NEWS_URLSET = (
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"\n'
    '        xmlns:news="http://www.google.com/schemas/sitemap-news/0.9"\n'
    '        xmlns:image="http://www.google.com/schemas/sitemap-image/1.1">'
)


@dataclass(frozen=True)
class SitemapArticle:
    slug: str
    title: str
    published_at: datetime | None
    updated_at: datetime | None = None
    image_url: str | None = None


def _iso(value: datetime | None) -> str | None:
    return ensure_utc(value).isoformat() if value else None


def build_sitemap(site_url: str, articles: Iterable[SitemapArticle]) -> str:
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', _URLSET]
    for path, priority, changefreq in STATIC_PAGES:
        parts.append("  <url>")
        parts.append(f"    <loc>{xml_escape(site_url + path)}</loc>")
        parts.append(f"    <changefreq>{changefreq}</changefreq>")
        parts.append(f"    <priority>{priority}</priority>")
        parts.append("  </url>")
    for article in articles:
        parts.append("  <url>")
        parts.append(f"    <loc>{xml_escape(f'{site_url}/article/{article.slug}')}</loc>")
        lastmod = _iso(article.updated_at) or _iso(article.published_at)
        if lastmod:
            parts.append(f"    <lastmod>{lastmod}</lastmod>")
        parts.append("    <changefreq>weekly</changefreq>")
        parts.append("    <priority>0.7</priority>")
        parts.append("  </url>")
    parts.append("</urlset>")
    return "\n".join(parts) + "\n"


def recent_articles(
    articles: Iterable[SitemapArticle], now: datetime, window: timedelta,
) -> list[SitemapArticle]:
    cutoff = ensure_utc(now) - window
    return [
        a for a in articles
        if a.published_at is not None and ensure_utc(a.published_at) >= cutoff
    ]


def build_news_sitemap(
    site_url: str,
    publication_name: str,
    articles: Iterable[SitemapArticle],
    now: datetime,
    window: timedelta = timedelta(days=2),
    language: str = "ru",
) -> str:
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', _NEWS_URLSET]
    for article in recent_articles(articles, now, window):
        parts.append("  <url>")
        parts.append(f"    <loc>{xml_escape(f'{site_url}/article/{article.slug}')}</loc>")
        parts.append("    <news:news>")
        parts.append("      <news:publication>")
        parts.append(f"        <news:name>{xml_escape(publication_name)}</news:name>")
        parts.append(f"        <news:language>{language}</news:language>")
        parts.append("      </news:publication>")
        parts.append(f"      <news:publication_date>{_iso(article.published_at)}</news:publication_date>")
        parts.append(f"      <news:title>{xml_escape(article.title)}</news:title>")
        parts.append("    </news:news>")
        if article.image_url:
            parts.append(
                f"    <image:image><image:loc>{xml_escape(article.image_url)}</image:loc></image:image>"
            )
        parts.append("  </url>")
    parts.append("</urlset>")
    return "\n".join(parts) + "\n"
