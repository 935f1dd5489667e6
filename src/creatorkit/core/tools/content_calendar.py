"""Content calendar: a dated posting plan across weeks and platforms.

Entries are laid out ``posts_per_week`` to a week starting at
``start_date``.  Every entry carries an ISO date and one of the requested
platforms; anything the model got wrong there is rescheduled onto the
entry's slot before duplicates are removed.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import DateInput, IntInput, ListInput, RequestConfig, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import ObjectListField, TextField

logger = logging.getLogger(__name__)

TEMPLATE = """\
You are a content strategist who plans realistic, consistent posting schedules.

Build a {{ weeks }}-week content calendar for a {{ niche }} creator posting \
{{ posts_per_week }} times per week on {{ platforms | commas }}, starting {{ start_date.isoformat() }}.

Produce:
- "summary": one or two sentences describing the plan.
- "items": exactly {{ weeks * posts_per_week }} entries, each with "date" (YYYY-MM-DD), \
"platform" (one of: {{ platforms | commas }}), "idea", "format", "caption_prompt" and "reminder".

Guidelines:
- Spread posts evenly through each week and rotate platforms.
- Mix formats (short video, carousel, story, live, text).
- Keep ideas specific and varied; no duplicates.
{% if region %}
- Account for holidays and events relevant to {{ region }}.
{% endif %}
- No emojis, no hashtags.
"""


def slot_date(index: int, config: RequestConfig) -> date:
    """Date of the ``index``-th (0-based) entry, spread evenly through its week."""
    per_week = config["posts_per_week"]
    week, slot = divmod(index, per_week)
    return config["start_date"] + timedelta(days=7 * week + (slot * 7) // per_week)


def _entry_count(config: RequestConfig) -> int:
    return config["weeks"] * config["posts_per_week"]


def fallback_date(n: int, config: RequestConfig) -> str:
    return slot_date(n - 1, config).isoformat()


def fallback_platform(n: int, config: RequestConfig) -> str:
    platforms = config["platforms"]
    return platforms[(n - 1) % len(platforms)]


def _parse_date(text: str) -> date | None:
    try:
        return datetime.strptime(text.strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def reschedule_item(item: dict[str, Any], index: int, config: RequestConfig) -> dict[str, Any]:
    """Give one entry a valid ISO date and one of the requested platforms."""
    platforms = config["platforms"]
    parsed = _parse_date(item["date"])
    if parsed is None:
        parsed = slot_date(index, config)
        logger.debug("Rescheduled calendar entry %d onto %s", index, parsed)
    item["date"] = parsed.isoformat()

    canonical = {p.lower(): p for p in platforms}
    platform = canonical.get(item["platform"].strip().lower())
    if platform is None:
        platform = platforms[index % len(platforms)]
    item["platform"] = platform
    return item


def export_calendar(result: dict[str, Any]) -> list[str]:
    lines = [result["summary"]]
    for item in result["items"]:
        lines.append(f"{item['date']} {item['platform']} [{item['format']}]: {item['idea']}")
    return lines


SPEC = ToolSpec(
    name="content_calendar",
    title="Content Calendar",
    description="Plan dated posts across weeks and platforms.",
    inputs=(
        TextInput("niche", required=True, description="The creator's niche."),
        ListInput(
            "platforms",
            default=("instagram",),
            max_items=8,
            description="Platforms to schedule on.",
        ),
        IntInput("posts_per_week", default=7, minimum=1, maximum=21, description="Posts per week."),
        IntInput("weeks", default=4, minimum=1, maximum=12, description="Number of weeks."),
        DateInput("start_date", description="First day of the plan (YYYY-MM-DD)."),
        TextInput("region", max_chars=60, description="Region for holidays and events."),
    ),
    outputs=(
        TextField(
            "summary",
            description="Plan summary",
            options=SanitizeOptions(max_words=40),
            fallback="Weekly content plan focused on consistency and variety.",
        ),
        ObjectListField(
            "items",
            description="Calendar entries in date order",
            cardinality=Cardinality.exact(_entry_count),
            key_fields=("date", "platform", "idea"),
            repair=reschedule_item,
            fields=(
                TextField("date", options=SanitizeOptions(quotes="strip"), fallback=fallback_date),
                TextField(
                    "platform", options=SanitizeOptions(max_words=3), fallback=fallback_platform
                ),
                TextField(
                    "idea", options=SanitizeOptions(max_words=14), fallback="Quick value tip {n}"
                ),
                TextField("format", options=SanitizeOptions(max_words=4), fallback="post"),
                TextField(
                    "caption_prompt",
                    options=SanitizeOptions(max_words=20),
                    fallback="Start with the result; end with a CTA to save/share.",
                ),
                TextField(
                    "reminder",
                    options=SanitizeOptions(max_words=18),
                    fallback="Batch record; add subtitles; schedule at best time.",
                ),
            ),
        ),
    ),
    template=TEMPLATE,
    export=export_calendar,
)
