"""Tests for per-field response cleanup."""

import itertools
from types import MappingProxyType

import pytest

from creatorkit.core.pipeline.exceptions import ToolSpecError
from creatorkit.core.pipeline.fields import RequestConfig, TextInput, normalize_config
from creatorkit.core.pipeline.sanitizer import (
    FILLER_LETTERS,
    Sanitizer,
    SanitizeOptions,
    filler_letters,
    resolve_limit,
)
from creatorkit.core.pipeline.schema import ListField, ObjectField, ObjectListField, TextField
from creatorkit.core.tools.registry import BUILTIN_TOOLS

HEADLINE = SanitizeOptions(
    quotes="surrounding",
    trailing_punctuation=True,
    banned_from="exclude_keywords",
    max_words="max_words",
    max_chars="max_chars",
    title_case=True,
)

PODCAST_HOOK = SanitizeOptions(quotes="strip", strip_numbering=True, max_words=14, min_chars=6)

_PREFIXES = ("", "1. ", "2) ", "- ", "\u2022 ", '"', "\u201c", "'", '"1. ', "'- ", "#", "@")
_BODIES = (
    "Why your microphone matters more than you think",
    "the 5 habits of top creators!!",
    "Follow @studio for #tips and ai tools",
    'He said "stop" twice',
    "x",
)
_SUFFIXES = ("", '"', "\u201d", "'", "!!", ".", '."', " \U0001f680", "?!?")


def _config(**values) -> RequestConfig:
    return RequestConfig(tool="test", values=MappingProxyType(values))


def _declared_options(fields):
    for declared in fields:
        if isinstance(declared, TextField):
            yield declared.options
        elif isinstance(declared, ListField):
            yield declared.item
        elif isinstance(declared, (ObjectField, ObjectListField)):
            yield from _declared_options(declared.fields)


# ---------------------------------------------------------------------------
# clean()
# ---------------------------------------------------------------------------


class TestClean:
    def test_non_text_is_empty(self):
        clean = Sanitizer(SanitizeOptions())
        assert clean(None) == ""
        assert clean(True) == ""
        assert clean({"text": "x"}) == ""
        assert clean(7) == "7"

    def test_emoji_and_whitespace(self):
        clean = Sanitizer(SanitizeOptions())
        assert clean("  Hi \U0001f680  there \n") == "Hi there"

    def test_headline_finish(self):
        clean = Sanitizer(HEADLINE, _config(max_words=12, max_chars=65))
        assert clean('"stop guessing what works."') == "Stop Guessing What Works"

    def test_numbering_and_tags(self):
        clean = Sanitizer(SanitizeOptions(strip_numbering=True, strip_tags=True))
        assert clean("1. Follow @studio for #tips") == "Follow studio for tips"

    def test_hashtag(self):
        clean = Sanitizer(SanitizeOptions(quotes="strip", hashtag=True))
        assert clean("#Morning Routine") == "#morningroutine"
        assert clean("#a") == ""

    def test_limits_from_config(self):
        clean = Sanitizer(HEADLINE, _config(max_words=3, max_chars=65))
        assert clean("one two three four five") == "One Two Three"

    def test_missing_limit_input_means_no_limit(self):
        clean = Sanitizer(HEADLINE, _config())
        text = "one two three four five six seven eight nine ten eleven twelve thirteen"
        assert len(clean(text).split()) == 13

    def test_fixed_limits(self):
        clean = Sanitizer(SanitizeOptions(max_words=2))
        assert clean("alpha beta gamma") == "alpha beta"
        assert resolve_limit(5, None) == 5
        assert resolve_limit("max_words", None) is None


class TestBanned:
    def test_banned_from_input_drops_whole_value(self):
        clean = Sanitizer(HEADLINE, _config(exclude_keywords=("Hack",), max_words=12))
        assert clean("Ten Growth Hacks That Work") == ""
        assert clean("Ten Growth Ideas That Work") == "Ten Growth Ideas That Work"

    def test_fixed_banned(self):
        clean = Sanitizer(SanitizeOptions(banned=("spam",)))
        assert clean("Not SPAM at all") == ""
        assert clean.is_banned("spammy") is True


class TestIdempotence:
    @pytest.mark.parametrize(
        "raw",
        [
            '"\u201cthe 5 habits of top creators!!\u201d"',
            "'why nobody reads your captions.'",
            "1) the only seo checklist you need in 2025 for small creators and shops",
        ],
    )
    def test_clean_twice_is_clean_once(self, raw):
        clean = Sanitizer(HEADLINE, _config(max_words=12, max_chars=65))
        once = clean(raw)
        assert once
        assert clean(once) == once

    def test_hashtag_idempotent(self):
        clean = Sanitizer(SanitizeOptions(quotes="strip", hashtag=True))
        once = clean("#Content__Creator!")
        assert clean(once) == once

    @pytest.mark.parametrize(
        "raw",
        [
            '"1. Why your microphone matters more than you think"',
            "\u201c2) Why your microphone matters more than you think\u201d",
            "- '3. Why your microphone matters more than you think'",
        ],
    )
    def test_quoted_numbering_is_removed(self, raw):
        clean = Sanitizer(PODCAST_HOOK)
        once = clean(raw)
        assert once == "Why your microphone matters more than you think"
        assert clean(once) == once

    @pytest.mark.parametrize(
        "tool, options",
        [(spec, options) for spec in BUILTIN_TOOLS for options in _declared_options(spec.outputs)],
        ids=lambda value: getattr(value, "name", None),
    )
    def test_every_declared_field_is_idempotent(self, tool, options):
        required = {
            declared.name: "x"
            for declared in tool.inputs
            if isinstance(declared, TextInput) and declared.required
        }
        clean = Sanitizer(options, normalize_config(tool.inputs, required, tool=tool.name))
        for prefix, body, suffix in itertools.product(_PREFIXES, _BODIES, _SUFFIXES):
            once = clean(prefix + body + suffix)
            assert clean(once) == once, prefix + body + suffix


class TestFillers:
    def test_letters_avoid_banned_terms(self):
        assert filler_letters(["e"]) == ("z", "x")
        assert filler_letters(["z"]) == ("x", "q")
        assert filler_letters(["zx", "x"]) == ("z", "q")

    def test_extra_characters_count_as_spellable(self):
        assert filler_letters(["#z"], extra="#") == ("x", "q")

    def test_no_letters_left_raises(self):
        with pytest.raises(ToolSpecError):
            filler_letters(list(FILLER_LETTERS))

    def test_headline_fillers_pass_the_field(self):
        sanitizer = Sanitizer(
            HEADLINE, _config(exclude_keywords=("e", "a", "o"), max_words=12, max_chars=65)
        )
        fillers = list(itertools.islice(sanitizer.fillers(), 40))
        assert fillers[0] == "Zzzzzzzx"
        assert len({text.lower() for text in fillers}) == 40
        assert all(text and not sanitizer.is_banned(text) for text in fillers)

    def test_hashtag_fillers_are_hashtags(self):
        sanitizer = Sanitizer(
            SanitizeOptions(quotes="surrounding", hashtag=True, banned=("e", "z"))
        )
        fillers = list(itertools.islice(sanitizer.fillers(), 3))
        assert fillers == ["#xxxxxxxq", "#xxxxxxqx", "#xxxxxxqq"]

    def test_fillers_respect_min_chars(self):
        sanitizer = Sanitizer(SanitizeOptions(banned=("e",), min_chars=12))
        assert sanitizer.accepts(next(sanitizer.fillers()))


# ---------------------------------------------------------------------------
# accepts()
# ---------------------------------------------------------------------------


class TestAccepts:
    def test_min_chars(self):
        sanitizer = Sanitizer(SanitizeOptions(min_chars=6))
        assert not sanitizer.accepts("short")
        assert sanitizer.accepts("longer")
        assert not sanitizer.accepts("")

    def test_reject_over_chars(self):
        sanitizer = Sanitizer(SanitizeOptions(reject_over_chars=10))
        assert sanitizer.accepts("0123456789")
        assert not sanitizer.accepts("0123456789a")


def test_references_lists_input_names():
    assert HEADLINE.references() == ("exclude_keywords", "max_words", "max_chars")
    assert SanitizeOptions(max_chars=65).references() == ()
