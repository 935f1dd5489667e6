"""Engagement kit: calls to action, comment prompts and polls."""

from __future__ import annotations

from typing import Any

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import EnumInput, IntInput, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ListField, ObjectListField, TextField, phrases

CONTENT_TYPES = ("post", "reel", "short", "video", "carousel", "story")
PLATFORMS = ("instagram", "linkedin", "twitter", "youtube", "tiktok")
AUDIENCES = ("general", "marketers", "developers", "founders", "creators", "designers")
GOALS = ("comments", "saves", "shares", "clicks", "follows")

LINE = SanitizeOptions(quotes="normalize", max_words=16)

TEMPLATE = """\
You are a community manager who turns passive viewers into active commenters.

Write an engagement kit for the {{ content_type or "post" }} described below.

Produce:
- exactly {{ max_count }} calls to action (short imperative lines),
- exactly {{ max_count }} comment prompts (open questions that invite replies),
- exactly {{ max_count }} polls, each with a question and 2-4 short options.

Guidelines:
- Platform: {{ platform or "instagram" }}; audience: {{ audience or "general" }}.
- Primary goal: drive {{ goal or "comments" }}.
- Keep every line under 16 words. No emojis, no hashtags, no numbering.
- Do not repeat yourself across items.

Caption: {{ caption }}
"""


def export_engagement(result: dict[str, Any]) -> list[str]:
    lines = list(result["ctas"])
    lines.extend(result["prompts"])
    for poll in result["polls"]:
        lines.append(f"{poll['question']} ({' / '.join(poll['options'])})")
    return lines


SPEC = ToolSpec(
    name="engagement",
    title="Engagement Kit",
    description="Generate CTAs, comment prompts and polls for one piece of content.",
    inputs=(
        TextInput("caption", required=True, description="The post caption or summary."),
        EnumInput("content_type", choices=CONTENT_TYPES, description="Content format."),
        EnumInput("platform", choices=PLATFORMS, description="Target platform."),
        EnumInput("audience", choices=AUDIENCES, description="Primary audience."),
        EnumInput("goal", choices=GOALS, description="Engagement goal."),
        IntInput("max_count", default=8, minimum=3, maximum=25, description="Items per section."),
    ),
    outputs=(
        ListField(
            "ctas",
            description="Calls to action",
            cardinality=Cardinality.exact("max_count"),
            item=LINE,
            fallback=phrases(
                "Comment your biggest takeaway below",
                "Save this for your next post",
                "Share this with someone who needs it",
                "Follow for more practical tips",
                "Tag a friend who should see this",
                "Drop a yes if this helped",
                "Send this to your team",
                "Tell me which tip you will try first",
                then="Share your take on tip {n} in the comments",
            ),
        ),
        ListField(
            "prompts",
            description="Comment prompts",
            cardinality=Cardinality.exact("max_count"),
            item=LINE,
            fallback=phrases(
                "What is your biggest challenge with this?",
                "Which tip will you try first?",
                "What would you add to this list?",
                "Have you tried this before?",
                "What surprised you most here?",
                "How do you handle this today?",
                "What should I cover next?",
                "Agree or disagree, and why?",
                then="What is your experience with point {n}?",
            ),
        ),
        ObjectListField(
            "polls",
            description="Polls",
            cardinality=Cardinality.exact("max_count"),
            key_fields=("question", "options"),
            fields=(
                TextField(
                    "question",
                    options=LINE,
                    fallback=phrases(
                        "Which would you choose?",
                        "Have you tried this yet?",
                        "How often do you post?",
                        "What should I cover next?",
                        then="Quick poll {n}: would you try this?",
                    ),
                ),
                ListField(
                    "options",
                    cardinality=Cardinality.between(2, 4),
                    item=SanitizeOptions(quotes="normalize", max_words=6),
                    fallback=phrases("Yes", "No", "Maybe", "Not sure", then="Option {n}"),
                ),
            ),
        ),
    ),
    template=TEMPLATE,
    export=export_engagement,
)
