"""Short-form video hooks, each paired with a caption."""

from __future__ import annotations

from typing import Any

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import EnumInput, IntInput, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ObjectListField, TextField, phrases

PLATFORMS = ("tiktok", "instagram", "youtube")
TONES = ("neutral", "energetic", "educational", "witty", "bold")

TEMPLATE = """\
You are a short-form video scriptwriter who writes the first three seconds that stop the scroll.

Write exactly {{ count }} hook and caption pairs about the topic below.

Rules:
- Hook: spoken opening line, at most 12 words, no quotation marks.
- Caption: on-screen or post caption, at most 32 words, no hashtags, no mentions.
- Platform: {{ platform or "tiktok" }}. Tone: {{ tone or "neutral" }}.
- Every hook must be different; vary curiosity, contrarian, list and story openers.
- No emojis.

Topic: {{ topic }}
"""


def export_pairs(result: dict[str, Any]) -> list[str]:
    return [f"{item['hook']} | {item['caption']}" for item in result["items"]]


SPEC = ToolSpec(
    name="hook_captions",
    title="Hooks and Captions",
    description="Write short-form video hooks, each with a matching caption.",
    inputs=(
        TextInput("topic", required=True, description="What the video is about."),
        EnumInput("platform", choices=PLATFORMS, description="Target platform."),
        EnumInput("tone", choices=TONES, description="Tone preset."),
        IntInput("count", default=10, minimum=4, maximum=25, description="Number of pairs."),
    ),
    outputs=(
        ObjectListField(
            "items",
            description="Hook and caption pairs",
            cardinality=Cardinality.exact("count"),
            key_fields=("hook",),
            fields=(
                TextField(
                    "hook",
                    options=SanitizeOptions(quotes="strip_double", max_words=12, min_chars=6),
                    fallback=phrases(
                        "Try this in 60 seconds",
                        "Nobody talks about this part",
                        "Stop scrolling if you want better results",
                        "Here is what changed everything for me",
                        "You are doing this the hard way",
                        "This takes less than a minute",
                        "Watch this before you try it",
                        "The mistake almost everyone makes here",
                        then="Try this in 60 seconds, part {n}",
                    ),
                ),
                TextField(
                    "caption",
                    options=SanitizeOptions(
                        quotes="strip_double", strip_tags=True, max_words=32, min_chars=8
                    ),
                    fallback="Save this so you can try it later. Then share your result.",
                ),
            ),
        ),
    ),
    template=TEMPLATE,
    export=export_pairs,
)
