"""Brand pitch: outreach email, media kit and pricing guidance."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.fields import IntInput, ListInput, RequestConfig, TextInput
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import (
    ListField,
    ObjectField,
    ObjectListField,
    TextField,
    phrases,
)

MAX_PLATFORMS = 8
MAX_PAST_WORK = 10

TEMPLATE = """\
You are a talent manager who writes brand partnership pitches that get replies.

Prepare a pitch package for a {{ niche }} creator with {{ "{:,}".format(audience_size) }} followers \
on {{ platforms | commas }}.

Produce:
- "email": a concise outreach email (at most 170 words){% if brand %} addressed to {{ brand }}{% endif %}.
- "media_kit": a short bio, an audience summary, per-platform highlights, 3-8 headline stats, \
past work and 3-8 suggested deliverables.
- "pricing": indicative rates per post, per video and for a bundle, plus short notes.

Guidelines:
{% if region %}
- Price for the {{ region }} market.
{% endif %}
{% if past_brands %}
- Reference past collaborations with: {{ past_brands | commas }}.
{% endif %}
- Be confident and specific; no emojis, no placeholders like [Name].
"""


def _platforms(config: RequestConfig) -> str:
    return ", ".join(config["platforms"])


def fallback_email(n: int, config: RequestConfig) -> str:
    greeting = f"Hi {config['brand']} team," if config.get("brand") else "Hi there,"
    return (
        f"{greeting} I'm a {config['niche']} creator reaching "
        f"{config['audience_size']:,} followers on {_platforms(config)}. "
        "My audience trusts my recommendations and engages with practical, honest content. "
        "I'd love to explore a partnership that introduces your brand to them with "
        "a mix of feed posts, short-form video and stories. "
        "Happy to share my media kit and tailor a proposal to your goals. "
        "Would you be open to a quick call next week?"
    )


def fallback_bio(n: int, config: RequestConfig) -> str:
    return f"{config['niche']} creator sharing practical, audience-first content."


def fallback_audience(n: int, config: RequestConfig) -> str:
    return f"{config['audience_size']:,} engaged followers interested in {config['niche']}."


def fallback_highlights(n: int, config: RequestConfig) -> str:
    return f"Consistent {config['niche']} content with an engaged community"


def derive_platforms(
    survivors: Sequence[dict[str, Any]], config: RequestConfig
) -> Iterator[dict[str, Any]]:
    for name in config["platforms"]:
        yield {"name": name}


def fallback_stat(n: int, config: RequestConfig) -> str:
    stats = (
        f"{config['audience_size']:,} total followers",
        f"Active on {len(config['platforms'])} platform(s)",
        f"Focused {config['niche']} audience",
    )
    return stats[n - 1] if n <= len(stats) else f"Highlight metric {n}"


def derive_past_work(survivors: Sequence[str], config: RequestConfig) -> Iterator[str]:
    for brand in config.get("past_brands", ()):
        yield f"Collaboration with {brand}"


def export_pitch(result: dict[str, Any]) -> list[str]:
    kit = result["media_kit"]
    pricing = result["pricing"]
    lines = [result["email"], f"Bio: {kit['bio']}", f"Audience: {kit['audience']}"]
    lines.extend(f"{p['name']}: {p['highlights']}" for p in kit["platforms"])
    lines.extend(f"Stat: {stat}" for stat in kit["stats"])
    lines.extend(f"Past work: {work}" for work in kit["past_work"])
    lines.extend(f"Deliverable: {d}" for d in kit["suggested_deliverables"])
    lines.append(f"Per post: {pricing['per_post']}")
    lines.append(f"Per video: {pricing['per_video']}")
    lines.append(f"Bundle: {pricing['bundle']}")
    lines.append(f"Notes: {pricing['notes']}")
    return lines


SPEC = ToolSpec(
    name="brand_pitch",
    title="Brand Pitch",
    description="Draft a brand outreach email with a media kit and pricing guidance.",
    inputs=(
        TextInput("niche", required=True, description="The creator's niche."),
        IntInput(
            "audience_size",
            default=10_000,
            minimum=100,
            maximum=1_000_000_000,
            description="Total followers.",
        ),
        ListInput(
            "platforms",
            default=("instagram",),
            max_items=MAX_PLATFORMS,
            description="Platforms the creator is active on.",
        ),
        TextInput("brand", max_chars=100, description="Brand being pitched."),
        TextInput("region", max_chars=60, description="Market the rates apply to."),
        ListInput("past_brands", max_items=MAX_PAST_WORK, description="Previous brand partners."),
    ),
    outputs=(
        TextField(
            "email",
            description="Outreach email",
            options=SanitizeOptions(quotes="normalize", max_words=170),
            fallback=fallback_email,
        ),
        ObjectField(
            "media_kit",
            description="Media kit",
            fields=(
                TextField("bio", options=SanitizeOptions(max_words=40), fallback=fallback_bio),
                TextField(
                    "audience",
                    options=SanitizeOptions(max_words=40),
                    fallback=fallback_audience,
                ),
                ObjectListField(
                    "platforms",
                    cardinality=Cardinality.between(
                        lambda c: len(c["platforms"]), MAX_PLATFORMS
                    ),
                    key_fields=("name",),
                    derive=derive_platforms,
                    fields=(
                        TextField(
                            "name", options=SanitizeOptions(max_words=4), fallback="Platform {n}"
                        ),
                        TextField(
                            "highlights",
                            options=SanitizeOptions(max_words=25),
                            fallback=fallback_highlights,
                        ),
                    ),
                ),
                ListField(
                    "stats",
                    cardinality=Cardinality.between(3, 8),
                    item=SanitizeOptions(max_words=12),
                    fallback=fallback_stat,
                ),
                ListField(
                    "past_work",
                    cardinality=Cardinality.between(
                        lambda c: len(c.get("past_brands", ())), MAX_PAST_WORK
                    ),
                    item=SanitizeOptions(max_words=20),
                    derive=derive_past_work,
                    fallback="Past collaboration {n}",
                ),
                ListField(
                    "suggested_deliverables",
                    cardinality=Cardinality.between(3, 8),
                    item=SanitizeOptions(max_words=12),
                    fallback=phrases(
                        "1x feed post",
                        "1x short-form video",
                        "3x story frames",
                        then="Custom deliverable {n}",
                    ),
                ),
            ),
        ),
        ObjectField(
            "pricing",
            description="Indicative pricing",
            fields=(
                TextField(
                    "per_post",
                    options=SanitizeOptions(max_words=20),
                    fallback="$200 - $800 per feed post, depending on reach and usage rights",
                ),
                TextField(
                    "per_video",
                    options=SanitizeOptions(max_words=20),
                    fallback="$400 - $1,500 per short-form video",
                ),
                TextField(
                    "bundle",
                    options=SanitizeOptions(max_words=25),
                    fallback="$1,000 - $3,000 for a post, video and story bundle",
                ),
                TextField(
                    "notes",
                    options=SanitizeOptions(max_words=40),
                    fallback="Rates are indicative; final pricing depends on deliverables, "
                    "usage rights and exclusivity.",
                ),
            ),
        ),
    ),
    template=TEMPLATE,
    export=export_pitch,
)
