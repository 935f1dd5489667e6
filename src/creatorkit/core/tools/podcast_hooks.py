"""Podcast episode hooks."""

from __future__ import annotations

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import EnumInput, IntInput, RequestConfig, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ListField

PLATFORMS = ("spotify", "apple", "youtube", "any")
TONES = ("educational", "insightful", "controversial", "story", "humorous")

TEMPLATE = """\
You are a podcast producer who writes cold-open hooks that make listeners press play.

Write exactly {{ max_count }} distinct hooks for an episode about the topic below.

Rules:
- One sentence each, at most 14 words and 120 characters.
- No numbering, no quotation marks, no emojis, no hashtags.
- Tone: {{ tone or "insightful" }}.
{% if platform and platform != "any" %}
- Written for listeners on {{ platform }}.
{% endif %}
- Mix questions, bold claims and story teasers.

Topic: {{ topic }}
"""

_FALLBACK_HOOKS = (
    "What if everything you know about {topic} is wrong?",
    "The truth about {topic} nobody tells you",
    "Why {topic} is harder than it looks",
    "What the experts get wrong about {topic}",
    "The one question about {topic} you should ask",
    "How {topic} changed the way we think",
)


def fallback_hook(n: int, config: RequestConfig) -> str:
    # Short topic so every fallback stays under the character ceiling.
    topic = " ".join(config["topic"].split(" ")[:5])[:48]
    if n <= len(_FALLBACK_HOOKS):
        return _FALLBACK_HOOKS[n - 1].format(topic=topic)
    return f"Episode insight {n}: what {topic} really means"


SPEC = ToolSpec(
    name="podcast_hooks",
    title="Podcast Hooks",
    description="Write cold-open hooks for a podcast episode.",
    inputs=(
        TextInput("topic", required=True, description="The episode topic."),
        EnumInput("platform", choices=PLATFORMS, description="Listening platform."),
        EnumInput("tone", choices=TONES, description="Tone preset."),
        IntInput("max_count", default=12, minimum=5, maximum=25, description="Number of hooks."),
    ),
    outputs=(
        ListField(
            "hooks",
            description="Episode hooks",
            cardinality=Cardinality.exact("max_count"),
            item=SanitizeOptions(
                quotes="strip",
                strip_numbering=True,
                max_words=14,
                min_chars=6,
                reject_over_chars=120,
            ),
            fallback=fallback_hook,
        ),
    ),
    template=TEMPLATE,
)
