"""Article Draft — prompts, output parsing and slugs for vote-driven articles.

Invariants:
    - parse_article() accepts only a JSON object with non-empty title and content;
      anything else raises GenerationError
    - Slug = slugify(title)[:60] + "-" + 8 base36 chars; Cyrillic letters are kept
    - Next-vote topics never include the topic that just won
    - Randomness comes from an injected random.Random, so callers and tests control it

Design Decisions:
    - Model is asked for strict JSON; a ```json fence around it is tolerated because
      models add one despite instructions
    - Missing tags/read_time fall back to defaults rather than failing the article
"""

import json
import random
import re
import string
from dataclasses import dataclass, field
from datetime import datetime

from kontekst.core.errors import GenerationError

EDITORIAL_AUTHOR = "Kontekst Editorial"
DEFAULT_READ_TIME = "10 min"
SLUG_BASE_LENGTH = 60
SLUG_SUFFIX_LENGTH = 8
NEXT_VOTE_OPTION_COUNT = 4
NEXT_VOTE_TITLE = "Which topic should we cover next?"
NEXT_VOTE_DESCRIPTION = "Premium readers vote for the next big deep dive"

TOPIC_POOL: tuple[str, ...] = (
    "Hidden China-EU negotiations",
    "Who funds climate activism",
    "Big Tech ties to intelligence agencies",
    "Crypto manipulation by hedge funds",
    "Shadow lobbyists in Brussels",
    "Oil cartels and OPEC+ politics",
    "Pharma patents and the WHO",
    "The US military-industrial complex",
    "Central bank digital currencies",
    "Nuclear power: renaissance or risk",
    "Agroholdings and food security",
    "Rare earth metals: the new oil",
)

SYSTEM_PROMPT = """You are an AI journalist at the independent analytical outlet "Kontekst", \
writing in the manner of The Economist and Politico with a cynical edge.

Write original text in Russian (Cyrillic). Every article carries at least 7-10 concrete \
facts, figures or dates, each attributed to a named source and date. Balance: 60% objective \
facts, 30% cynical analysis, 10% provocative questions. Avoid worn-out cliches."""

_BASE36 = string.digits + string.ascii_lowercase
_SLUG_STRIP = re.compile(r"[^a-z0-9а-яё\s-]", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


@dataclass(frozen=True)
class ArticleDraft:
    title: str
    excerpt: str
    content: str
    tags: list[str] = field(default_factory=list)
    read_time: str = DEFAULT_READ_TIME


def build_user_prompt(winning_topic: str, now: datetime) -> str:
    today = now.strftime("%d %B %Y (%A)")
    return f"""Write an exclusive analytical article on: "{winning_topic}".

Premium readers of "Kontekst" chose this topic by vote, so it must be especially deep.

Requirements:
1) Original analysis without cliches: scepticism towards power and corporations, practical \
consequences for people, hidden motives.
2) At least 7-10 facts with sources in the form "according to [Source] on [date], [fact]".
3) Structure: sharp hook, facts with data, analysis, 2-3 scenarios, conclusions.
4) Length: 1000-2000 words.
5) End with: "What do you think? Discuss it in the Discussions section."

Today is {today}. Use only current {now.year} information.

Answer strictly as JSON:
{{
  "title": "headline, up to 100 characters",
  "excerpt": "hook subtitle, up to 200 characters",
  "content": "full text with ## subheadings",
  "tags": ["tag1", "tag2", "tag3"],
  "read_time": "X min"
}}"""


def parse_article(raw: str) -> ArticleDraft:
    text = _FENCE.sub("", raw.strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Failed to parse generated article: {e}") from e
    if not isinstance(data, dict):
        raise GenerationError("Generated article is not a JSON object")

    title = str(data.get("title") or "").strip()
    content = str(data.get("content") or "").strip()
    if not title or not content:
        raise GenerationError("Generated article is missing title or content")

    tags = data.get("tags") or []
    if not isinstance(tags, list):
        tags = []
    return ArticleDraft(
        title=title,
        excerpt=str(data.get("excerpt") or "").strip(),
        content=content,
        tags=[str(t) for t in tags],
        read_time=str(data.get("read_time") or DEFAULT_READ_TIME),
    )


def slugify(title: str) -> str:
    cleaned = _SLUG_STRIP.sub("", title.lower())
    return _WHITESPACE.sub("-", cleaned)[:SLUG_BASE_LENGTH]


def unique_slug(title: str, rng: random.Random) -> str:
    suffix = "".join(rng.choice(_BASE36) for _ in range(SLUG_SUFFIX_LENGTH))
    return f"{slugify(title)}-{suffix}"


def pick_next_topics(
    winning_topic: str,
    rng: random.Random,
    pool: tuple[str, ...] = TOPIC_POOL,
    count: int = NEXT_VOTE_OPTION_COUNT,
) -> list[str]:
    available = [t for t in pool if t != winning_topic]
    return rng.sample(available, min(count, len(available)))
