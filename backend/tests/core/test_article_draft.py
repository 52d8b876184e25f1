"""Article Draft — tests for model output parsing, slugs and next-vote topics.

Tests cover:
    - strict JSON accepted, ```json fence tolerated
    - malformed / incomplete output → GenerationError
    - slug keeps Cyrillic, strips punctuation, adds 8-char base36 suffix
    - next topics exclude the winner and are distinct
"""

import json
import random
import re
from datetime import datetime, timezone

import pytest

from kontekst.core.article_draft import (
    TOPIC_POOL, build_user_prompt, parse_article, pick_next_topics, slugify, unique_slug,
)
from kontekst.core.errors import GenerationError


def _payload(**overrides):
    data = {
        "title": "Oil cartels", "excerpt": "Who sets the price",
        "content": "## Hook\nText", "tags": ["oil", "opec"], "read_time": "8 min",
    }
    data.update(overrides)
    return json.dumps(data, ensure_ascii=False)


# ─── parse_article ───────────────────────────────────────────────

def test_parses_plain_json():
    draft = parse_article(_payload())
    assert draft.title == "Oil cartels"
    assert draft.tags == ["oil", "opec"]
    assert draft.read_time == "8 min"


def test_parses_fenced_json():
    draft = parse_article(f"```json\n{_payload()}\n```")
    assert draft.content == "## Hook\nText"


def test_missing_optional_fields_default():
    draft = parse_article(json.dumps({"title": "T", "content": "C"}))
    assert draft.tags == []
    assert draft.read_time == "10 min"
    assert draft.excerpt == ""


@pytest.mark.parametrize("raw", [
    "not json at all",
    "[1, 2, 3]",
    json.dumps({"title": "", "content": "C"}),
    json.dumps({"title": "T"}),
])
def test_unusable_output_raises(raw):
    with pytest.raises(GenerationError):
        parse_article(raw)


# ─── slugs ───────────────────────────────────────────────────────

def test_slugify_keeps_cyrillic_and_strips_punctuation():
    assert slugify("Нефть и ОПЕК+: кто решает?") == "нефть-и-опек-кто-решает"


def test_slugify_truncates_base():
    assert len(slugify("word " * 40)) == 60


def test_unique_slug_suffix():
    slug = unique_slug("Oil cartels", random.Random(1))
    assert re.fullmatch(r"oil-cartels-[0-9a-z]{8}", slug)


# ─── next topics ─────────────────────────────────────────────────

def test_next_topics_exclude_winner():
    winner = TOPIC_POOL[0]
    for seed in range(25):
        topics = pick_next_topics(winner, random.Random(seed))
        assert winner not in topics
        assert len(topics) == len(set(topics)) == 4


def test_next_topics_capped_by_pool():
    assert sorted(pick_next_topics("A", random.Random(0), pool=("A", "B", "C"))) == ["B", "C"]


def test_user_prompt_names_topic_and_year():
    prompt = build_user_prompt("Rare earths", datetime(2026, 7, 3, tzinfo=timezone.utc))
    assert '"Rare earths"' in prompt
    assert "2026" in prompt
