"""Headline rewrite: exactly five Title Case variations of one headline."""

from __future__ import annotations

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import EnumInput, IntInput, ListInput, RequestConfig, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ListField

VARIATION_COUNT = 5

TONES = (
    "authoritative",
    "playful",
    "friendly",
    "urgent",
    "professional",
    "witty",
    "bold",
    "casual",
)
AUDIENCES = (
    "general",
    "marketers",
    "developers",
    "product managers",
    "executives",
    "founders",
)

TEMPLATE = """\
You are an expert direct-response copywriter who specializes in crafting highly \
clickable, engaging, and curiosity-driven headlines for articles, landing pages, and ads.

I will provide you with one original headline. You will generate 5 unique headline \
variations designed to maximize engagement, click-through rate, and reader curiosity.

Strict formatting and style rules:
- Each headline must be concise: at most {{ max_words }} words and {{ max_chars }} characters.
- Use proven techniques: numbers, power words, emotional triggers, urgency, and curiosity gaps.
- Vary structures; avoid repeating the same pattern across the 5 headlines.
- Be compelling but not misleading or spammy. Avoid overhype or ALL CAPS.
- No emojis or excessive punctuation. One punctuation mark max at the end. No trailing periods.
- Use Title Case (capitalize major words; keep small words lowercase unless first or last).
- Do not copy the original headline; reframe it creatively.
{% if tone %}
- Adopt this tone consistently across the set: {{ tone }}.
{% endif %}
{% if audience %}
- Tailor the language and value proposition to this audience: {{ audience }}.
{% endif %}
{% if include_keywords %}
- Where natural, incorporate these keywords across the variations: {{ include_keywords | commas }}.
{% endif %}
{% if exclude_keywords %}
- Avoid these words/phrases: {{ exclude_keywords | commas }}.
{% endif %}

Original Headline: {{ headline }}
"""

_FALLBACK_PATTERNS = (
    "{subject}: What Actually Works",
    "The Simple Guide to {subject}",
    "Why {subject} Matters More Than You Think",
    "What Nobody Tells You About {subject}",
    "{subject}, Explained in Plain Terms",
    "The Fastest Way to Get Started: {subject}",
)


def _subject(config: RequestConfig) -> str:
    words = config["headline"].rstrip(".!?").split(" ")
    return " ".join(words[:6])


def fallback_headline(n: int, config: RequestConfig) -> str:
    subject = _subject(config)
    if n <= len(_FALLBACK_PATTERNS):
        return _FALLBACK_PATTERNS[n - 1].format(subject=subject)
    if n % 2:
        return f"Headline Option {n}"
    return f"Fresh Take {n}: {subject}"


def include_score(text: str, config: RequestConfig) -> int:
    """How many include-keywords a variation contains."""
    lowered = text.lower()
    return sum(1 for k in config.get("include_keywords", ()) if k.lower() in lowered)


SPEC = ToolSpec(
    name="headlines",
    title="Headline Variations",
    description="Rewrite one headline into five clickable Title Case variations.",
    inputs=(
        TextInput("headline", required=True, description="The original headline."),
        EnumInput("tone", choices=TONES, description="Tone preset."),
        EnumInput("audience", choices=AUDIENCES, description="Primary audience."),
        ListInput("include_keywords", description="Keywords to work in where natural."),
        ListInput("exclude_keywords", description="Words/phrases that must not appear."),
        IntInput("max_words", default=12, minimum=3, maximum=12, description="Max words per headline."),
        IntInput("max_chars", default=65, minimum=20, maximum=65, description="Max characters per headline."),
    ),
    outputs=(
        ListField(
            "variations",
            description="Headline variations",
            cardinality=Cardinality.exact(VARIATION_COUNT),
            item=SanitizeOptions(
                quotes="surrounding",
                trailing_punctuation=True,
                banned_from="exclude_keywords",
                max_words="max_words",
                max_chars="max_chars",
                title_case=True,
            ),
            fallback=fallback_headline,
            reserved_from="headline",
            rank_by=include_score,
        ),
    ),
    template=TEMPLATE,
    export=lambda result: list(result["variations"]),
)
