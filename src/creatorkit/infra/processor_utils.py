"""Text processor protocol, built-in implementations, and registry.

Every processor is a small deterministic ``str -> str`` transform.  The
response sanitizer chains them in a fixed order; each one is safe to
apply to its own output (re-running never changes the text further).

Lives in infra so that both tool declarations and the pipeline can
import without circular dependencies.
"""

from __future__ import annotations

import re
from abc import abstractmethod
from typing import Any, Protocol

# Emoji blocks plus the dingbat/symbol range, regional-indicator flags,
# the emoji variation selector and zero-width joiner.
EMOJI_PATTERN = re.compile(
    "["
    "\U0001f300-\U0001faff"
    "\U0001f1e6-\U0001f1ff"
    "\u2600-\u27bf"
    "\ufe0f"
    "\u200d"
    "]"
)

DOUBLE_QUOTES = '"\u201c\u201d\u201e\u201f'
SINGLE_QUOTES = "'\u2018\u2019\u201a\u201b"
ALL_QUOTES = DOUBLE_QUOTES + SINGLE_QUOTES

_CURLY_TO_STRAIGHT = str.maketrans(
    {
        "\u201c": '"',
        "\u201d": '"',
        "\u201e": '"',
        "\u201f": '"',
        "\u2018": "'",
        "\u2019": "'",
        "\u201a": "'",
        "\u201b": "'",
    }
)

# Articles, short prepositions and coordinating conjunctions kept
# lowercase inside a title.
SMALL_WORDS = frozenset(
    {
        "a", "an", "and", "as", "at", "but", "by", "for", "from", "in",
        "into", "nor", "of", "on", "onto", "or", "out", "over", "per",
        "so", "the", "to", "up", "via", "vs", "with",
    }
)  # fmt: skip

# All-caps tokens of two or more characters are treated as acronyms.
_ACRONYM = re.compile(r"^[A-Z0-9]{2,}$")
_KNOWN_ACRONYMS = (
    (re.compile(r"\bAi\b"), "AI"),
    (re.compile(r"\bSeo\b"), "SEO"),
)

_WHITESPACE = re.compile(r"\s+")
_LEADING_NUMBERING = re.compile(r"^[\-\u2013\u2022*\d.)\s]+")
_TRAILING_STOPS = re.compile(r"[.!]+$")
_REPEATED_MARKS = re.compile(r"[!?]{2,}$")
_HASHTAG_INVALID = re.compile(r"[^a-z0-9_]")
_REPEATED_UNDERSCORES = re.compile(r"_+")


class TextProcessor(Protocol):
    """Structural protocol: anything with ``.process(str) -> str``."""

    @property
    def processor_name(self) -> str:
        return ""

    @abstractmethod
    def process(self, content: str) -> str: ...


# ---------------------------------------------------------------------------
# Character-level cleanup
# ---------------------------------------------------------------------------


class CollapseWhitespace(TextProcessor):
    """Collapse runs of whitespace to a single space and trim."""

    processor_name = "collapse_whitespace"

    def process(self, content: str) -> str:
        return _WHITESPACE.sub(" ", content).strip()


class StripEmoji(TextProcessor):
    """Remove characters inside the emoji ranges.

    Best effort: emoji outside these blocks survive and a few non-emoji
    symbols inside them are removed.
    """

    processor_name = "strip_emoji"

    def process(self, content: str) -> str:
        return EMOJI_PATTERN.sub("", content)


class NormalizeQuotes(TextProcessor):
    """Replace curly quotes with their straight equivalents."""

    processor_name = "normalize_quotes"

    def process(self, content: str) -> str:
        return content.translate(_CURLY_TO_STRAIGHT)


class StripQuotes(TextProcessor):
    """Remove every quote character in ``chars``."""

    processor_name = "strip_quotes"

    def __init__(self, chars: str = ALL_QUOTES) -> None:
        self._table = str.maketrans("", "", chars)

    def process(self, content: str) -> str:
        return content.translate(self._table)


class StripSurroundingQuotes(TextProcessor):
    """Remove quote runs at the very start and end of the text."""

    processor_name = "strip_surrounding_quotes"

    _leading = re.compile(rf"^\s*[{ALL_QUOTES}]+\s*")
    _trailing = re.compile(rf"\s*[{ALL_QUOTES}]+\s*$")

    def process(self, content: str) -> str:
        return self._trailing.sub("", self._leading.sub("", content))


class StripLeadingNumbering(TextProcessor):
    """Drop list markers such as ``1.``, ``2)``, ``-`` or bullets."""

    processor_name = "strip_leading_numbering"

    def process(self, content: str) -> str:
        return _LEADING_NUMBERING.sub("", content)


class StripTags(TextProcessor):
    """Remove ``#`` and ``@`` characters."""

    processor_name = "strip_tags"

    _table = str.maketrans("", "", "#@")

    def process(self, content: str) -> str:
        return content.translate(self._table)


class StripTrailingPunctuation(TextProcessor):
    """Drop trailing periods/exclamations and squash repeated ``?``/``!``."""

    processor_name = "strip_trailing_punctuation"

    def process(self, content: str) -> str:
        trimmed = _TRAILING_STOPS.sub("", content.rstrip())
        return _REPEATED_MARKS.sub(lambda m: m.group(0)[0], trimmed).rstrip()


class HashtagForm(TextProcessor):
    """Force ``#`` followed by lowercase letters, digits and underscores.

    Returns an empty string when fewer than two usable characters remain.
    """

    processor_name = "hashtag"

    def __init__(self, min_length: int = 3) -> None:
        self._min_length = min_length

    def process(self, content: str) -> str:
        body = content.strip().lstrip("#").lower()
        body = _HASHTAG_INVALID.sub("", body)
        body = _REPEATED_UNDERSCORES.sub("_", body)
        tag = f"#{body}"
        if len(tag) < self._min_length:
            return ""
        return tag


# ---------------------------------------------------------------------------
# Length ceilings
# ---------------------------------------------------------------------------


class TruncateWords(TextProcessor):
    """Keep at most ``max_words`` space-delimited tokens."""

    processor_name = "truncate_words"

    def __init__(self, max_words: int) -> None:
        self._max_words = max_words

    def process(self, content: str) -> str:
        words = content.split(" ")
        if len(words) <= self._max_words:
            return content
        return " ".join(words[: self._max_words]).strip()


class TruncateChars(TextProcessor):
    """Cap the text at ``max_chars`` without cutting a word when possible.

    The cut falls on the last space before the limit unless that space
    sits at or before ``min_break`` characters (capped at half the limit),
    in which case the text is hard-cut at the limit.
    """

    processor_name = "truncate"

    def __init__(self, max_chars: int, min_break: int = 40) -> None:
        self._max_chars = max_chars
        self._min_break = min(min_break, max_chars // 2)

    def process(self, content: str) -> str:
        if len(content) <= self._max_chars:
            return content
        cut = content[: self._max_chars]
        if content[self._max_chars] == " ":
            return cut.strip()
        last_space = cut.rfind(" ")
        if last_space > self._min_break:
            cut = cut[:last_space]
        return cut.strip()


# ---------------------------------------------------------------------------
# Casing
# ---------------------------------------------------------------------------


class TitleCase(TextProcessor):
    """Chicago-style title case.

    Small words stay lowercase unless first or last; all-caps tokens of
    two or more characters are kept verbatim (acronym heuristic, which
    also keeps genuine shouted words).
    """

    processor_name = "title_case"

    def __init__(self, small_words: frozenset[str] = SMALL_WORDS) -> None:
        self._small_words = small_words

    def _token(self, word: str, edge: bool) -> str:
        lower = word.lower()
        if not edge and lower in self._small_words:
            cased = lower
        elif _ACRONYM.match(word):
            cased = word
        else:
            cased = word[:1].upper() + word[1:].lower()
        # Case mapping can change length for a few characters (e.g. German sharp s).
        return cased if len(cased) == len(word) else word

    def process(self, content: str) -> str:
        if not content:
            return content
        words = content.split(" ")
        last = len(words) - 1
        titled = " ".join(
            self._token(word, i == 0 or i == last) for i, word in enumerate(words)
        )
        for pattern, replacement in _KNOWN_ACRONYMS:
            titled = pattern.sub(replacement, titled)
        return titled


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_KNOWN_PROCESSORS: dict[str, type] = {
    cls.processor_name: cls
    for cls in (
        CollapseWhitespace,
        StripEmoji,
        NormalizeQuotes,
        StripQuotes,
        StripSurroundingQuotes,
        StripLeadingNumbering,
        StripTags,
        StripTrailingPunctuation,
        HashtagForm,
        TruncateWords,
        TruncateChars,
        TitleCase,
    )
}


def get_processor(name: str, **kwargs: Any) -> TextProcessor:
    """Look up a processor by name and return an instance."""
    cls = _KNOWN_PROCESSORS.get(name)
    if cls is None:
        raise NotImplementedError(f"Processor '{name}' is not supported.")
    return cls(**kwargs)
