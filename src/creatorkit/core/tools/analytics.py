"""Audience analytics: posting windows, formats, keywords and post ideas."""

from __future__ import annotations

from typing import Any

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import EnumInput, IntInput, RequestConfig, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ListField, ObjectListField, TextField, phrases

PLATFORMS = ("instagram", "tiktok", "youtube", "twitter", "linkedin")
GOALS = ("reach", "engagement", "growth", "conversions")

KEYWORD_SUFFIXES = (
    "tips",
    "ideas",
    "for beginners",
    "guide",
    "mistakes",
    "trends",
    "strategy",
    "tools",
    "checklist",
    "examples",
)

TEMPLATE = """\
You are a social media analyst who turns a creator's context into a concrete growth plan.

Analyze the {{ niche }} niche{% if platform %} on {{ platform }}{% endif %} with the goal of \
{{ goal or "engagement" }}.

Produce:
- "analysis_summary": 2-3 sentences on what to focus on.
- "best_times": 5-8 posting windows such as "Tue 18:00-20:00 local".
- "best_formats": 4-8 content formats that fit the niche.
- "keyword_suggestions": exactly {{ count_keywords }} search keywords, no hashtags.
- "post_ideas": exactly {{ count_ideas }} ideas, each with "idea", "format" and "why".
{% if region %}

Audience region: {{ region }}. Use local time windows for it.
{% endif %}
{% if past_text %}

Recent posts and their performance, for context:
{{ past_text }}
{% endif %}
"""


def fallback_summary(n: int, config: RequestConfig) -> str:
    platform = config.get("platform") or "social"
    return (
        f"Focus on consistent, value-dense {platform} content for your "
        f"{config['niche']} audience and post during its peak windows."
    )


def fallback_keyword(n: int, config: RequestConfig) -> str:
    stem = " ".join(config["niche"].split(" ")[:3])
    if n <= len(KEYWORD_SUFFIXES):
        return f"{stem} {KEYWORD_SUFFIXES[n - 1]}"
    return f"{stem} idea {n}"


def fallback_idea_format(n: int, config: RequestConfig) -> str:
    return config.get("platform") or "post"


def export_analytics(result: dict[str, Any]) -> list[str]:
    lines = [result["analysis_summary"]]
    lines.extend(f"Best time: {t}" for t in result["best_times"])
    lines.extend(f"Format: {f}" for f in result["best_formats"])
    lines.append("Keywords: " + ", ".join(result["keyword_suggestions"]))
    for idea in result["post_ideas"]:
        lines.append(f"[{idea['format']}] {idea['idea']} ({idea['why']})")
    return lines


SPEC = ToolSpec(
    name="analytics",
    title="Audience Analytics",
    description="Recommend posting windows, formats, keywords and post ideas for a niche.",
    inputs=(
        TextInput("niche", required=True, description="The creator's niche."),
        EnumInput("platform", choices=PLATFORMS, description="Target platform."),
        TextInput("region", max_chars=60, description="Audience region."),
        EnumInput("goal", choices=GOALS, description="Growth goal."),
        TextInput("past_text", max_chars=2000, description="Recent posts and results."),
        IntInput(
            "count_keywords", default=12, minimum=5, maximum=25, description="Keywords to suggest."
        ),
        IntInput("count_ideas", default=6, minimum=3, maximum=15, description="Post ideas."),
    ),
    outputs=(
        TextField(
            "analysis_summary",
            description="What to focus on",
            options=SanitizeOptions(max_words=80),
            fallback=fallback_summary,
        ),
        ListField(
            "best_times",
            description="Posting windows",
            cardinality=Cardinality.between(5, 8),
            item=SanitizeOptions(max_words=8),
            fallback=phrases(
                "Mon 11:00-13:00 local",
                "Tue 18:00-20:00 local",
                "Wed 12:00-14:00 local",
                "Thu 19:00-21:00 local",
                "Fri 11:00-13:00 local",
                "Sat 10:00-12:00 local",
                "Sun 17:00-19:00 local",
                "Tue 08:00-09:00 local",
                then="Window {n}: 12:00-13:00 local",
            ),
        ),
        ListField(
            "best_formats",
            description="Content formats",
            cardinality=Cardinality.between(4, 8),
            item=SanitizeOptions(max_words=8),
            fallback=phrases(
                "Short-form video",
                "Carousel",
                "Single image post",
                "Story",
                "Live session",
                "Long-form video",
                "Text post",
                "Tutorial",
                then="Format idea {n}",
            ),
        ),
        ListField(
            "keyword_suggestions",
            description="Search keywords",
            cardinality=Cardinality.exact("count_keywords"),
            item=SanitizeOptions(strip_tags=True, max_words=6),
            fallback=fallback_keyword,
        ),
        ObjectListField(
            "post_ideas",
            description="Post ideas",
            cardinality=Cardinality.exact("count_ideas"),
            key_fields=("idea",),
            fields=(
                TextField(
                    "idea", options=SanitizeOptions(max_words=16), fallback="Quick tip {n}"
                ),
                TextField(
                    "format",
                    options=SanitizeOptions(max_words=6),
                    fallback=fallback_idea_format,
                ),
                TextField(
                    "why",
                    options=SanitizeOptions(max_words=25),
                    fallback="Short, value-dense content performs reliably.",
                ),
            ),
        ),
    ),
    template=TEMPLATE,
    export=export_analytics,
)
