"""Trend radar: emerging topics in a niche, each with content angles."""

from __future__ import annotations

from typing import Any

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import EnumInput, IntInput, RequestConfig, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ObjectListField, TextField

PLATFORMS = ("instagram", "tiktok", "twitter", "youtube", "linkedin")
FORMATS = ("post", "video", "reel", "short", "carousel", "thread")
AUDIENCES = ("general", "marketers", "developers", "founders", "creators", "designers")
TIMEFRAMES = ("today", "week", "month")

TEMPLATE = """\
You are a trend analyst who spots emerging conversations before they peak.

List exactly {{ max_topics }} trending or emerging topics in the niche below{% if timeframe %} for this {{ timeframe }}{% endif %}.

For each topic give:
- "topic": a short name (at most 12 words),
- "reason": why it is gaining attention now (at most 20 words),
- "ideas": exactly {{ ideas_per_topic }} content ideas, each with an "angle" and a "format".

Guidelines:
- Platform: {{ platform or "any" }}; preferred format: {{ format or "post" }}; audience: {{ audience or "general" }}.
{% if region %}
- Prioritize what is relevant in {{ region }}.
{% endif %}
- Be specific; avoid evergreen advice disguised as a trend.
- No emojis, no hashtags.

Niche: {{ niche }}
"""


def fallback_format(n: int, config: RequestConfig) -> str:
    return config.get("format") or "post"


def export_topics(result: dict[str, Any]) -> list[str]:
    lines = []
    for topic in result["topics"]:
        lines.append(f"{topic['topic']}: {topic['reason']}")
        lines.extend(f"- {idea['angle']} [{idea['format']}]" for idea in topic["ideas"])
    return lines


SPEC = ToolSpec(
    name="trend_radar",
    title="Trend Radar",
    description="Surface emerging topics in a niche with ready-to-use content angles.",
    inputs=(
        TextInput("niche", required=True, description="The creator's niche."),
        EnumInput("platform", choices=PLATFORMS, description="Target platform."),
        EnumInput("format", choices=FORMATS, description="Preferred content format."),
        EnumInput("audience", choices=AUDIENCES, description="Primary audience."),
        TextInput("region", max_chars=60, description="Region to focus on."),
        EnumInput("timeframe", choices=TIMEFRAMES, description="Trend window."),
        IntInput("max_topics", default=10, minimum=3, maximum=20, description="Number of topics."),
        IntInput(
            "ideas_per_topic", default=3, minimum=1, maximum=6, description="Ideas per topic."
        ),
    ),
    outputs=(
        ObjectListField(
            "topics",
            description="Trending topics",
            cardinality=Cardinality.exact("max_topics"),
            key_fields=("topic",),
            fields=(
                TextField(
                    "topic", options=SanitizeOptions(max_words=12), fallback="Topic {n}"
                ),
                TextField(
                    "reason", options=SanitizeOptions(max_words=20), fallback="Emerging theme"
                ),
                ObjectListField(
                    "ideas",
                    cardinality=Cardinality.exact("ideas_per_topic"),
                    key_fields=("angle",),
                    fields=(
                        TextField(
                            "angle",
                            options=SanitizeOptions(max_words=16),
                            fallback="Quick tip: angle {n}",
                        ),
                        TextField(
                            "format",
                            options=SanitizeOptions(max_words=8),
                            fallback=fallback_format,
                        ),
                    ),
                ),
            ),
        ),
    ),
    template=TEMPLATE,
    export=export_topics,
)
