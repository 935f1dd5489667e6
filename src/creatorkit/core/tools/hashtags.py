"""Hashtag generation for one caption."""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import EnumInput, IntInput, ListInput, RequestConfig, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ListField
from creatorkit.infra.processor_utils import SMALL_WORDS, get_processor

PLATFORMS = ("instagram", "tiktok", "twitter", "youtube", "linkedin")

GENERIC_TAGS = (
    "#contentcreator",
    "#creatortips",
    "#socialmediatips",
    "#contentstrategy",
    "#digitalcreator",
    "#growthtips",
    "#marketingtips",
    "#creatorlife",
    "#smallbusiness",
    "#learnontiktok",
    "#explorepage",
    "#dailyinspiration",
)

_STOPWORDS = SMALL_WORDS | {
    "and",
    "are",
    "how",
    "our",
    "that",
    "the",
    "this",
    "what",
    "why",
    "with",
    "you",
    "your",
}
_WORD_RE = re.compile(r"[a-z0-9]+")
_TAG_FORM = get_processor("hashtag", min_length=2)

TEMPLATE = """\
You are a social media growth strategist who builds high-performing hashtag sets.

Generate exactly {{ max_count }} hashtags for the caption below.

Rules:
- Every hashtag starts with '#' and uses only lowercase letters, digits or underscores.
- No spaces, no emojis, no punctuation inside a hashtag.
- Mix broad, niche and community hashtags; avoid banned or spammy tags.
- No duplicates.
{% if platform %}
- Optimize for {{ platform }} discovery and its hashtag culture.
{% endif %}
{% if include_keywords %}
- Build some hashtags around these keywords: {{ include_keywords | commas }}.
{% endif %}
{% if exclude_keywords %}
- Never use these words: {{ exclude_keywords | commas }}.
{% endif %}

Caption: {{ caption }}
"""


def hashtag_body(term: str) -> str:
    """An exclude term as it can appear in a tag: ``#Morning Routine`` -> ``morningroutine``."""
    return _TAG_FORM.process(term)[1:]


def caption_words(caption: str) -> list[str]:
    words = []
    for word in _WORD_RE.findall(caption.lower()):
        if len(word) >= 3 and word not in _STOPWORDS and word not in words:
            words.append(word)
    return words


def derive_hashtags(survivors: Sequence[str], config: RequestConfig) -> Iterator[str]:
    """Padding candidates: plural/singular variants, caption words, generic tags."""
    for tag in survivors:
        core = tag[1:]
        yield "#" + (core[:-1] if core.endswith("s") else core + "s")
    for keyword in config.get("include_keywords", ()):
        yield "#" + keyword
    words = caption_words(config["caption"])
    yield from ("#" + word for word in words)
    yield from ("#" + a + b for a, b in zip(words, words[1:]))
    platform = config.get("platform")
    if platform:
        yield f"#{platform}tips"
        yield f"#{platform}growth"
    yield from GENERIC_TAGS


def fallback_hashtag(n: int, config: RequestConfig) -> str:
    words = caption_words(config["caption"]) or ["creator"]
    stems = (words[0], "tips", "daily")
    return f"#{stems[n % len(stems)]}{n}"


def export_hashtags(result: dict) -> list[str]:
    return list(result["hashtags"])


SPEC = ToolSpec(
    name="hashtags",
    title="Hashtags",
    description="Generate a de-duplicated set of platform-ready hashtags for a caption.",
    inputs=(
        TextInput("caption", required=True, description="The post caption."),
        EnumInput("platform", choices=PLATFORMS, description="Target platform."),
        ListInput("include_keywords", description="Keywords to build hashtags around."),
        ListInput(
            "exclude_keywords",
            item=hashtag_body,
            description="Words no hashtag may contain.",
        ),
        IntInput("max_count", default=20, minimum=5, maximum=50, description="Number of hashtags."),
    ),
    outputs=(
        ListField(
            "hashtags",
            description="Hashtags",
            cardinality=Cardinality.exact("max_count"),
            item=SanitizeOptions(
                quotes="surrounding",
                hashtag=True,
                banned_from="exclude_keywords",
            ),
            fallback=fallback_hashtag,
            derive=derive_hashtags,
        ),
    ),
    template=TEMPLATE,
    export=export_hashtags,
)
