"""SEO Routes — crawler Open Graph HTML, sitemaps and the crawler middleware.

Invariants:
    - GET /api/og without slug → 400 "Missing slug parameter" (plain text)
    - Found article → long public cache; fallback page → no-cache
    - Crawler middleware only intercepts GET /article/{slug}; everything else passes
"""

import logging
from contextlib import aclosing
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from kontekst.config import Settings, get_settings
from kontekst.core.domain_types import SitemapKind
from kontekst.core.seo_meta import is_crawler
from kontekst.infrastructure.database import get_db
from kontekst.services.seo import OgPage, og_page, sitemap_xml

logger = logging.getLogger(__name__)
router = APIRouter(tags=["seo"])

ARTICLE_PREFIX = "/article/"


def og_response(page: OgPage, settings: Settings) -> HTMLResponse:
    if page.found:
        cache = f"public, max-age={settings.og_cache_max_age}, s-maxage={settings.og_edge_max_age}"
    else:
        cache = "no-cache"
    return HTMLResponse(page.html, headers={"Cache-Control": cache})


@router.get("/api/og")
async def og_meta(
    slug: str | None = Query(None), db: AsyncSession = Depends(get_db),
):
    if not slug:
        return PlainTextResponse("Missing slug parameter", status_code=400)
    settings = get_settings()
    return og_response(await og_page(db, slug, settings), settings)


@router.get("/sitemap.xml")
async def sitemap(
    type: str = Query(SitemapKind.STANDARD.value), db: AsyncSession = Depends(get_db),
):
    xml = await sitemap_xml(
        db, get_settings(), datetime.now(timezone.utc),
        news=type == SitemapKind.NEWS.value,
    )
    return Response(
        xml,
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=3600"},
    )


class CrawlerMetaMiddleware(BaseHTTPMiddleware):
    """Serves Open Graph HTML to link-preview bots on /article/{slug}."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if (
            request.method != "GET"
            or not path.startswith(ARTICLE_PREFIX)
            or not is_crawler(request.headers.get("user-agent"))
        ):
            return await call_next(request)

        slug = path[len(ARTICLE_PREFIX):].strip("/")
        if not slug:
            return await call_next(request)

        settings = get_settings()
        provider = request.app.dependency_overrides.get(get_db, get_db)
        async with aclosing(provider()) as sessions:
            db = await anext(sessions)
            page = await og_page(db, slug, settings)
        logger.info(f"Crawler meta served for {slug}")
        return og_response(page, settings)
