"""SEO — crawler meta HTML and sitemaps over published articles.

Invariants:
    - Unknown slug or a failing store read → site-default meta (never an error page)
    - Only published articles are exposed
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.config import Settings
from kontekst.core import seo_meta, sitemap
from kontekst.models.article import Article

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OgPage:
    html: str
    found: bool


async def og_page(db: AsyncSession, slug: str, settings: Settings) -> OgPage:
    try:
        result = await db.execute(
            select(Article).where(Article.slug == slug, Article.is_published.is_(True)),
        )
        article = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.warning(f"OG lookup failed for {slug}: {e}")
        article = None

    if article is None:
        meta = seo_meta.default_meta(
            settings.site_url, settings.site_name,
            settings.site_description, settings.default_og_image,
        )
        return OgPage(html=seo_meta.render_og_html(meta, settings.site_name), found=False)

    meta = seo_meta.article_meta(
        site_url=settings.site_url,
        site_name=settings.site_name,
        default_image=settings.default_og_image,
        slug=article.slug,
        title=article.title,
        excerpt=article.excerpt,
        image_url=article.image_url,
        category=article.category,
        published_at=article.published_at,
        author_name=article.author_name,
    )
    return OgPage(html=seo_meta.render_og_html(meta, settings.site_name), found=True)


async def _published(db: AsyncSession) -> list[sitemap.SitemapArticle]:
    result = await db.execute(
        select(
            Article.slug, Article.title, Article.published_at,
            Article.updated_at, Article.image_url,
        )
        .where(Article.is_published.is_(True))
        .order_by(Article.published_at.desc()),
    )
    return [
        sitemap.SitemapArticle(
            slug=slug, title=title, published_at=published_at,
            updated_at=updated_at, image_url=image_url,
        )
        for slug, title, published_at, updated_at, image_url in result.all()
    ]


async def sitemap_xml(
    db: AsyncSession, settings: Settings, now: datetime, news: bool = False,
) -> str:
    articles = await _published(db)
    logger.info(f"Generating {'news' if news else 'standard'} sitemap with {len(articles)} articles")
    if news:
        return sitemap.build_news_sitemap(
            settings.site_url, settings.site_name, articles, now,
            window=timedelta(days=settings.news_sitemap_window_days),
        )
    return sitemap.build_sitemap(settings.site_url, articles)
