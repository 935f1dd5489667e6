"""Carousel outline: one slide per object, closing on a call to action."""

from __future__ import annotations

import itertools
import re
from collections.abc import Iterator
from typing import Any

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import EnumInput, IntInput, RequestConfig, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ListField, ObjectListField, TextField

STYLES = ("educational", "tips", "story", "case-study")
PLATFORMS = ("instagram", "linkedin", "twitter")
AUDIENCES = ("general", "marketers", "developers", "founders", "creators")

CTA_PATTERN = re.compile(r"cta|call to action|follow|save|learn more", re.IGNORECASE)
CTA_TITLES = ("Your Turn: Save and Follow", "Your Turn: Follow for More")
CTA_BULLETS = ["Follow for more", "Save this post", "Share with a friend"]

TEMPLATE = """\
You are a content strategist who designs swipeable social media carousels.

Turn the caption below into a carousel outline of exactly {{ slides }} slides.

Guidelines:
- Style: {{ style or "educational" }}.
- Platform: {{ platform or "instagram" }}; audience: {{ audience or "general" }}.
- Slide 1 is a scroll-stopping hook that promises a clear payoff.
- Each middle slide delivers one idea: a short title and 1-5 punchy bullets.
- The final slide is a call to action (save, follow or share).
- Titles have no ending period. Bullets are plain sentences, no emojis, no numbering.
- Do not repeat slide titles.

Caption: {{ caption }}
"""


def fallback_title(n: int, config: RequestConfig) -> str:
    return "Big Idea" if n == 1 else f"Slide {n}"


def cta_titles() -> Iterator[str]:
    """Closing-slide titles, numbered once the fixed ones are used up."""
    yield from CTA_TITLES
    for n in itertools.count(2):
        yield f"Your Turn: Follow for More, Part {n}"


def ensure_call_to_action(result: dict[str, Any], config: RequestConfig) -> dict[str, Any]:
    """Replace the last slide with a CTA slide unless it already is one."""
    slides = result["slides"]
    if not slides or CTA_PATTERN.search(slides[-1]["title"]):
        return result
    taken = {slide["title"].lower() for slide in slides[:-1]}
    title = next(t for t in cta_titles() if t.lower() not in taken)
    slides[-1] = {"title": title, "bullets": list(CTA_BULLETS)}
    return result


def export_slides(result: dict[str, Any]) -> list[str]:
    lines = []
    for i, slide in enumerate(result["slides"], start=1):
        lines.append(f"Slide {i}: {slide['title']}")
        lines.extend(f"- {bullet}" for bullet in slide["bullets"])
    return lines


SPEC = ToolSpec(
    name="carousel",
    title="Carousel Outline",
    description="Outline a swipeable carousel with titled slides and bullets.",
    inputs=(
        TextInput("caption", required=True, description="The caption or topic to expand."),
        IntInput("slides", default=7, minimum=3, maximum=10, description="Number of slides."),
        EnumInput("style", choices=STYLES, description="Carousel style."),
        EnumInput("platform", choices=PLATFORMS, description="Target platform."),
        EnumInput("audience", choices=AUDIENCES, description="Primary audience."),
    ),
    outputs=(
        ObjectListField(
            "slides",
            description="Slides in order",
            cardinality=Cardinality.exact("slides"),
            key_fields=("title",),
            fields=(
                TextField(
                    "title",
                    options=SanitizeOptions(max_words=10),
                    fallback=fallback_title,
                ),
                ListField(
                    "bullets",
                    cardinality=Cardinality.between(1, 5),
                    item=SanitizeOptions(max_words=22),
                    fallback="Key point {n}",
                ),
            ),
        ),
    ),
    template=TEMPLATE,
    finalize=ensure_call_to_action,
    export=export_slides,
)
