"""Tests for array count enforcement."""

import itertools
from types import MappingProxyType

import pytest

from creatorkit.core.pipeline.cardinality import PAD_ATTEMPT_SLACK, Cardinality, dedupe, enforce
from creatorkit.core.pipeline.exceptions import ToolSpecError
from creatorkit.core.pipeline.fields import RequestConfig


def _config(**values) -> RequestConfig:
    return RequestConfig(tool="test", values=MappingProxyType(values))


def _options(existing):
    return (f"Option {n}" for n in itertools.count(len(existing) + 1))


# ---------------------------------------------------------------------------
# Cardinality
# ---------------------------------------------------------------------------


class TestCardinality:
    def test_exact(self):
        assert Cardinality.exact(5).resolve() == (5, 5)
        assert Cardinality.exact(5).describe() == "exactly 5"

    def test_bounds_from_inputs(self):
        card = Cardinality.between("count", 8)
        assert card.resolve(_config(count=3)) == (3, 8)
        assert card.describe(_config(count=3)) == "between 3 and 8"
        assert card.references() == ("count",)

    def test_computed_bound(self):
        card = Cardinality.between(lambda c: len(c["platforms"]), 8)
        assert card.resolve(_config(platforms=("a", "b"))) == (2, 8)

    def test_maximum_never_below_minimum(self):
        assert Cardinality.between(5, 2).resolve() == (5, 5)

    def test_up_to(self):
        assert Cardinality.between(0, 4).describe() == "up to 4"

    def test_unknown_input_reference(self):
        with pytest.raises(ToolSpecError):
            Cardinality.exact("count").resolve(_config())
        with pytest.raises(ToolSpecError):
            Cardinality.exact(lambda c: 1).resolve()


# ---------------------------------------------------------------------------
# dedupe / enforce
# ---------------------------------------------------------------------------


class TestDedupe:
    def test_case_insensitive_first_wins(self):
        assert dedupe(["Grow", "grow", "", "Post"]) == ["Grow", "Post"]

    def test_reserved(self):
        assert dedupe(["Same Title", "Other"], reserved=["same title"]) == ["Other"]

    def test_key(self):
        items = [{"q": "A"}, {"q": "a"}, {"q": "B"}]
        assert dedupe(items, key=lambda item: item["q"]) == [{"q": "A"}, {"q": "B"}]


class TestEnforce:
    def test_truncates_to_maximum(self):
        result = enforce([str(n) for n in range(7)], 5, 5)
        assert result.items == ["0", "1", "2", "3", "4"]
        assert result.truncated == 2
        assert result.padded == 0

    def test_counts_duplicates(self):
        result = enforce(["a", "A", "b"], 0, 10)
        assert result.items == ["a", "b"]
        assert result.deduplicated == 1

    def test_pads_to_minimum(self):
        result = enforce(["Real one"], 3, 3, pad=_options)
        assert result.items == ["Real one", "Option 2", "Option 3"]
        assert result.padded == 2
        assert result.pad_values == ["Option 2", "Option 3"]

    def test_padding_skips_collisions(self):
        result = enforce(["Option 2"], 3, 3, pad=_options)
        assert result.items == ["Option 2", "Option 3", "Option 4"]

    def test_padding_skips_reserved_and_empty(self):
        def candidates(existing):
            yield ""
            yield "Original"
            yield "Fresh"

        result = enforce([], 1, 1, pad=candidates, reserved=["original"])
        assert result.items == ["Fresh"]

    def test_stuck_stream_raises(self):
        with pytest.raises(ToolSpecError, match="Could not pad"):
            enforce(["x"], 2, 2, pad=lambda existing: itertools.repeat("x"))

    def test_exhausted_stream_raises(self):
        with pytest.raises(ToolSpecError, match="ran out"):
            enforce([], 2, 2, pad=lambda existing: ["only"])

    def test_no_pad_when_minimum_met(self):
        def never(existing):
            raise AssertionError("pad should not be called")

        assert enforce(["a", "b"], 2, 4, pad=never).items == ["a", "b"]

    def test_rescue_finishes_a_stuck_stream(self):
        def codes(existing):
            return (f"code {n}" for n in itertools.count(1))

        result = enforce(["x"], 4, 4, pad=lambda existing: itertools.repeat("x"), rescue=codes)
        assert result.items == ["x", "code 1", "code 2", "code 3"]
        assert result.padded == 3

    def test_rescue_gets_its_own_budget(self):
        def late(existing):
            yield from itertools.repeat("", PAD_ATTEMPT_SLACK)
            yield "late"

        result = enforce([], 1, 1, pad=lambda existing: itertools.repeat(""), rescue=late)
        assert result.items == ["late"]

    def test_rescue_not_used_when_pad_suffices(self):
        def never(existing):
            raise AssertionError("rescue should not be called")

        assert enforce([], 2, 2, pad=_options, rescue=never).items == ["Option 1", "Option 2"]

    def test_both_streams_dry_raises(self):
        with pytest.raises(ToolSpecError, match="ran out"):
            enforce([], 3, 3, pad=lambda existing: ["one"], rescue=lambda existing: ["two"])
