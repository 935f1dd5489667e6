"""Tests for reply assembly: cleanup, counts and fallbacks per declared field."""

from types import MappingProxyType

import pytest

from creatorkit.core.pipeline.assembler import RepairLog, ShapeAssembler
from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.exceptions import ToolSpecError
from creatorkit.core.pipeline.fields import RequestConfig
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import (
    ListField,
    ObjectField,
    ObjectListField,
    TextField,
)

SUMMARY = TextField("summary", fallback="A summary of {topic}.")
POINTS = ListField("points", cardinality=Cardinality.exact(3), fallback="Point {n}")
POLLS = ObjectListField(
    "polls",
    fields=(
        TextField("question", options=SanitizeOptions(min_chars=6), fallback="Question {n}?"),
        ListField("options", cardinality=Cardinality.between(2, 3), fallback="Option {n}"),
    ),
    cardinality=Cardinality.exact(2),
    key_fields=("question",),
)


def _assemble(outputs, raw, **values):
    config = RequestConfig(tool="demo", values=MappingProxyType(values))
    assembler = ShapeAssembler(outputs, config)
    return assembler.assemble(raw), assembler.repairs


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


class TestTextField:
    def test_clean_value_kept(self):
        result, repairs = _assemble((SUMMARY,), {"summary": "  Great  stuff \U0001f525 "}, topic="tea")
        assert result == {"summary": "Great stuff"}
        assert repairs.total == 0

    def test_missing_value_defaulted(self):
        result, repairs = _assemble((SUMMARY,), {}, topic="tea")
        assert result == {"summary": "A summary of tea."}
        assert repairs.summary() == {"summary:defaulted": 1}

    def test_non_object_reply(self):
        result, _ = _assemble((SUMMARY,), ["not", "an", "object"], topic="tea")
        assert result == {"summary": "A summary of tea."}

    def test_unusable_value_dropped_then_defaulted(self):
        result, repairs = _assemble((SUMMARY,), {"summary": {"text": "x"}}, topic="tea")
        assert result["summary"] == "A summary of tea."
        assert repairs.summary() == {"summary:defaulted": 1, "summary:dropped": 1}

    def test_empty_fallback_is_a_declaration_error(self):
        with pytest.raises(ToolSpecError):
            _assemble((TextField("summary"),), {})


# ---------------------------------------------------------------------------
# String arrays
# ---------------------------------------------------------------------------


class TestListField:
    def test_drop_dedupe_pad(self):
        raw = {"points": ["First", "first", "   ", {"x": 1}]}
        result, repairs = _assemble((POINTS,), raw)
        assert result["points"] == ["First", "Point 2", "Point 3"]
        assert repairs.summary() == {
            "points:deduplicated": 1,
            "points:dropped": 2,
            "points:padded": 2,
        }

    def test_truncates(self):
        result, repairs = _assemble((POINTS,), {"points": ["a", "b", "c", "d", "e"]})
        assert result["points"] == ["a", "b", "c"]
        assert repairs.summary() == {"points:truncated": 2}

    def test_not_a_list(self):
        result, _ = _assemble((POINTS,), {"points": "one, two"})
        assert result["points"] == ["Point 1", "Point 2", "Point 3"]

    def test_pad_skips_existing_values(self):
        result, _ = _assemble((POINTS,), {"points": ["point 2"]})
        assert result["points"] == ["point 2", "Point 3", "Point 4"]

    def test_reserved_input_value_excluded(self):
        field = ListField(
            "variations",
            cardinality=Cardinality.exact(2),
            item=SanitizeOptions(quotes="surrounding", title_case=True),
            fallback="Option {n}",
            reserved_from="headline",
        )
        raw = {"variations": ['"same old title"', "A Fresh Title"]}
        result, _ = _assemble((field,), raw, headline="Same Old Title")
        assert result["variations"] == ["A Fresh Title", "Option 2"]

    def test_rank_by_orders_before_truncating(self):
        field = ListField(
            "tags",
            cardinality=Cardinality.exact(2),
            fallback="tag{n}",
            rank_by=lambda text, config: text.count("seo"),
        )
        raw = {"tags": ["plain", "seo tips", "seo seo", "other"]}
        result, _ = _assemble((field,), raw)
        assert result["tags"] == ["seo seo", "seo tips"]

    def test_derived_candidates_before_fallback(self):
        field = ListField(
            "tags",
            cardinality=Cardinality.exact(3),
            fallback="tag{n}",
            derive=lambda survivors, config: ["derived", "", "derived"],
        )
        result, _ = _assemble((field,), {"tags": ["model"]})
        assert result["tags"] == ["model", "derived", "tag2"]


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------


class TestObjectFields:
    def test_object_list_drops_and_pads(self):
        raw = {
            "polls": [
                {"question": "Which day works?", "options": ["Monday"]},
                "junk",
                {"question": "", "options": []},
            ]
        }
        result, repairs = _assemble((POLLS,), raw)
        assert result["polls"] == [
            {"question": "Which day works?", "options": ["Monday", "Option 2"]},
            {"question": "Question 2?", "options": ["Option 1", "Option 2"]},
        ]
        assert repairs.counts[("polls", "dropped")] == 2
        assert repairs.counts[("polls", "padded")] == 1

    def test_entry_with_short_supplied_text_dropped(self):
        raw = {"polls": [{"question": "Hi?", "options": ["a", "b"]}]}
        result, _ = _assemble((POLLS,), raw)
        assert [poll["question"] for poll in result["polls"]] == ["Question 1?", "Question 2?"]

    def test_object_list_dedupes_on_key(self):
        raw = {
            "polls": [
                {"question": "Which day works?", "options": ["a", "b"]},
                {"question": "WHICH DAY WORKS?", "options": ["c", "d"]},
            ]
        }
        result, _ = _assemble((POLLS,), raw)
        assert result["polls"][0]["options"] == ["a", "b"]
        assert result["polls"][1]["question"] == "Question 2?"

    def test_nested_object(self):
        pitch = ObjectField(
            "pitch",
            fields=(
                TextField("subject", fallback="Partnership idea"),
                ListField("points", cardinality=Cardinality.between(1, 2), fallback="Point {n}"),
            ),
        )
        result, repairs = _assemble((pitch,), {"pitch": {"points": ["x", "y", "z"]}})
        assert result == {"pitch": {"subject": "Partnership idea", "points": ["x", "y"]}}
        assert repairs.counts[("pitch.subject", "defaulted")] == 1
        assert repairs.counts[("pitch.points", "truncated")] == 1


def test_repair_log_ignores_zero_counts():
    repairs = RepairLog("demo")
    repairs.record("field", "padded", 0)
    assert repairs.total == 0
    assert repairs.summary() == {}
