"""Response sanitizer: per-field text cleanup built from text processors.

``SanitizeOptions`` is the per-field declaration; ``Sanitizer`` binds it
to one ``RequestConfig`` (limits and banned lists may come from inputs)
and chains the processors from ``creatorkit.infra.processor_utils``.

Order of operations::

    collapse -> strip emoji -> collapse
    -> quote policy
    -> strip numbering / strip tags          (optional)
    -> hashtag form                          (optional)
       (structural steps repeat until stable)
    -> banned-substring check                (whole value dropped)
    -> truncate words -> truncate chars
    -> finish: surrounding quotes / trailing punctuation, until stable
    -> title case                            (optional, last)

Each step only ever shortens or re-cases the text, so running the
sanitizer on its own output returns it unchanged.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from creatorkit.infra.processor_utils import (
    DOUBLE_QUOTES,
    TextProcessor,
    get_processor,
)

from .exceptions import ToolSpecError

if TYPE_CHECKING:
    from .fields import RequestConfig

QuotePolicy = Literal["keep", "normalize", "strip", "strip_double", "surrounding"]

# An int, or the name of an integer input holding the limit.
Limit = int | str | None

# Letters, in order of preference, that may spell last-resort filler entries.
FILLER_LETTERS = "zxqjkvwyfgbmpcdhlurtnsoiae"
FILLER_WIDTH = 8


@dataclass(frozen=True)
class SanitizeOptions:
    """Cleanup declared for one string field."""

    quotes: QuotePolicy = "normalize"
    strip_numbering: bool = False
    strip_tags: bool = False
    hashtag: bool = False
    banned: tuple[str, ...] = ()
    banned_from: str | None = None
    max_words: Limit = None
    max_chars: Limit = None
    min_break: int = 40
    trailing_punctuation: bool = False
    title_case: bool = False
    min_chars: int = 0
    reject_over_chars: int | None = None

    def references(self) -> tuple[str, ...]:
        """Input names this declaration reads at run time."""
        refs = [self.banned_from] + [
            limit for limit in (self.max_words, self.max_chars) if isinstance(limit, str)
        ]
        return tuple(ref for ref in refs if ref)


def resolve_limit(limit: Limit, config: RequestConfig | None) -> int | None:
    if isinstance(limit, str):
        if config is None:
            return None
        return config.get(limit)
    return limit


def filler_letters(banned: Iterable[str], extra: str = "") -> tuple[str, str]:
    """Two letters from which no banned term can be spelled.

    A term can only occur inside a word written with the letters (plus
    *extra*) when every character of the term is among them.
    """
    for first, second in itertools.combinations(FILLER_LETTERS, 2):
        allowed = {first, second, *extra}
        if not any(set(term) <= allowed for term in banned):
            return first, second
    raise ToolSpecError("Banned terms leave no letters to spell filler entries.")


class Sanitizer:
    """Callable cleaner for one field under one request config."""

    def __init__(
        self, options: SanitizeOptions, config: RequestConfig | None = None
    ) -> None:
        self.options = options
        self._collapse = get_processor("collapse_whitespace")
        self._emoji = get_processor("strip_emoji")

        structural: list[TextProcessor] = []
        if options.quotes == "normalize":
            structural.append(get_processor("normalize_quotes"))
        elif options.quotes == "strip":
            structural.append(get_processor("strip_quotes"))
        elif options.quotes == "strip_double":
            structural.append(get_processor("strip_quotes", chars=DOUBLE_QUOTES))
        elif options.quotes == "surrounding":
            structural.append(get_processor("strip_surrounding_quotes"))
        if options.strip_numbering:
            structural.append(get_processor("strip_leading_numbering"))
        if options.strip_tags:
            structural.append(get_processor("strip_tags"))
        if options.hashtag:
            structural.append(get_processor("hashtag"))
        self._structural = structural

        banned = list(options.banned)
        if options.banned_from and config is not None:
            banned.extend(config.get(options.banned_from) or ())
        self.banned = tuple(word.lower() for word in banned if word)

        ceilings: list[TextProcessor] = []
        max_words = resolve_limit(options.max_words, config)
        if max_words:
            ceilings.append(get_processor("truncate_words", max_words=max_words))
        max_chars = resolve_limit(options.max_chars, config)
        if max_chars:
            ceilings.append(
                get_processor(
                    "truncate", max_chars=max_chars, min_break=options.min_break
                )
            )
        self._ceilings = ceilings

        finish: list[TextProcessor] = []
        if options.quotes == "surrounding":
            finish.append(get_processor("strip_surrounding_quotes"))
        if options.trailing_punctuation:
            finish.append(get_processor("strip_trailing_punctuation"))
        self._finish = finish

        self._title = get_processor("title_case") if options.title_case else None

    def is_banned(self, text: str) -> bool:
        lowered = text.lower()
        return any(word in lowered for word in self.banned)

    def clean(self, value: Any) -> str:
        """Return the cleaned string, or ``""`` when the value is unusable."""
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return ""
        text = self._emoji.process(self._collapse.process(str(value)))
        text = self._collapse.process(text)

        # One removal can expose another, e.g. a quote hiding list numbering.
        while True:
            previous = text
            for processor in self._structural:
                text = self._collapse.process(processor.process(text))
            if text == previous:
                break
        if not text or self.is_banned(text):
            return ""

        for processor in self._ceilings:
            text = processor.process(text)

        while self._finish:
            previous = text
            for processor in self._finish:
                text = self._collapse.process(processor.process(text))
            if text == previous:
                break

        if self._title is not None:
            text = self._title.process(text)
        return text

    __call__ = clean

    def fillers(self) -> Iterator[str]:
        """Cleaned last-resort entries that no banned term matches.

        Each is a binary numeral spelled with two letters the banned terms
        cannot be built from, so any number of unique entries exist.
        """
        extra = "#" if self.options.hashtag else ""
        zero, one = filler_letters(self.banned, extra)
        spell = str.maketrans("01", zero + one)
        width = max(FILLER_WIDTH, self.options.min_chars)
        for n in itertools.count(1):
            word = format(n, "b").zfill(width).translate(spell)
            yield self.clean(f"#{word}" if self.options.hashtag else word)

    def accepts(self, text: str) -> bool:
        """Whether a cleaned value passes the field's length checks."""
        if not text or len(text) < self.options.min_chars:
            return False
        limit = self.options.reject_over_chars
        return limit is None or len(text) <= limit
