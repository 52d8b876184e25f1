"""Crawler Meta — Open Graph / Twitter card HTML for link-preview bots.

Invariants:
    - render_og_html() is PURE: OgMeta in, HTML string out
    - Every interpolated value is HTML-escaped (Jinja2 autoescape)
    - Article pages redirect humans who land on the crawler HTML to /article/{slug};
      the site-default page never redirects
    - is_crawler() matches case-insensitively on substrings of the User-Agent

Design Decisions:
    - Template is inline: one small document, no template directory to ship
    - Canonical URL uses the category path so shares point at the sectioned URL
"""

from dataclasses import dataclass
from datetime import datetime

from jinja2 import Environment

CRAWLER_USER_AGENTS: tuple[str, ...] = (
    "TelegramBot",
    "Twitterbot",
    "facebookexternalhit",
    "LinkedInBot",
    "WhatsApp",
    "Slackbot",
    "vkShare",
    "Discordbot",
)

CATEGORY_PATHS = {"news": "news", "analytics": "analytics", "opinions": "opinions"}
CATEGORY_NAMES = {"news": "News", "analytics": "Analytics", "opinions": "Opinions"}
DEFAULT_ARTICLE_PATH = "article"

_OG_TEMPLATE = """<!DOCTYPE html>
<html lang="ru">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ meta.title }}</title>
  <meta name="description" content="{{ meta.description }}">
  <link rel="canonical" href="{{ meta.url }}">
  <meta property="og:type" content="{{ meta.type }}">
  <meta property="og:site_name" content="{{ site_name }}">
  <meta property="og:title" content="{{ meta.title }}">
  <meta property="og:description" content="{{ meta.description }}">
  <meta property="og:url" content="{{ meta.url }}">
  <meta property="og:image" content="{{ meta.image }}">
  <meta property="og:image:width" content="1200">
  <meta property="og:image:height" content="630">
  <meta property="og:image:type" content="image/jpeg">
  <meta property="og:locale" content="ru_RU">
{%- if meta.published_time %}
  <meta property="article:published_time" content="{{ meta.published_time }}">
{%- endif %}
{%- if meta.author %}
  <meta property="article:author" content="{{ meta.author }}">
{%- endif %}
{%- if meta.section %}
  <meta property="article:section" content="{{ meta.section }}">
{%- endif %}
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:title" content="{{ meta.title }}">
  <meta name="twitter:description" content="{{ meta.description }}">
  <meta name="twitter:image" content="{{ meta.image }}">
{%- if meta.redirect_url %}
  <meta http-equiv="refresh" content="0; url={{ meta.redirect_url }}">
{%- endif %}
</head>
<body>
  <p>Redirecting to <a href="{{ meta.redirect_url or meta.url }}">{{ meta.title }}</a>...</p>
</body>
</html>
"""

_env = Environment(autoescape=True)
_template = _env.from_string(_OG_TEMPLATE)


@dataclass(frozen=True)
class OgMeta:
    title: str
    description: str
    image: str
    url: str
    type: str = "website"
    published_time: str | None = None
    author: str | None = None
    section: str | None = None
    redirect_url: str | None = None


def is_crawler(user_agent: str | None) -> bool:
    if not user_agent:
        return False
    ua = user_agent.lower()
    return any(bot.lower() in ua for bot in CRAWLER_USER_AGENTS)


def public_image_url(image_url: str | None, default: str) -> str:
    """Signed storage links expire; crawlers cache previews, so use the public form."""
    if not image_url:
        return default
    return image_url.replace("/storage/v1/object/sign/", "/storage/v1/object/public/")


def default_meta(site_url: str, site_name: str, description: str, image: str) -> OgMeta:
    return OgMeta(title=site_name, description=description, image=image, url=site_url)


def article_meta(
    *,
    site_url: str,
    site_name: str,
    default_image: str,
    slug: str,
    title: str,
    excerpt: str | None,
    image_url: str | None,
    category: str | None,
    published_at: datetime | None,
    author_name: str | None,
) -> OgMeta:
    path = CATEGORY_PATHS.get(category or "", DEFAULT_ARTICLE_PATH)
    return OgMeta(
        title=f"{title} | {site_name}",
        description=excerpt or f"Read on {site_name}",
        image=public_image_url(image_url, default_image),
        url=f"{site_url}/{path}/{slug}",
        type="article",
        published_time=published_at.isoformat() if published_at else None,
        author=author_name,
        section=CATEGORY_NAMES.get(category or "", category),
        redirect_url=f"{site_url}/article/{slug}",
    )


def render_og_html(meta: OgMeta, site_name: str) -> str:
    return _template.render(meta=meta, site_name=site_name)
