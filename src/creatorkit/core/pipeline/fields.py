"""Typed input declarations and the config normalizer.

Every tool declares its inputs as a tuple of field objects; together they
compile into one pydantic model per tool (``input_model``).  Raw caller
input comes from an open text box, so the model repairs instead of
rejecting: lenient validators parse and clamp numbers, unknown enum
members and unparseable values fall back to the declared default, and
optional fields with no usable value are left out entirely.  The only
input error ever raised is a blank required text field.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import KW_ONLY, dataclass
from datetime import date, datetime, timedelta
from functools import lru_cache
from types import MappingProxyType
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    WrapValidator,
    create_model,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.fields import FieldInfo

from .exceptions import ValidationError

_WHITESPACE = re.compile(r"\s+")


def camel_case(name: str) -> str:
    """``max_count`` -> ``maxCount``."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def next_monday(today: date) -> date:
    """The Monday strictly after *today*."""
    return today + timedelta(days=7 - today.weekday())


def scalar_text(value: Any) -> str:
    """Whitespace-collapsed text of a string or number; ``""`` otherwise."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()


def or_default(default: Callable[[], Any]) -> WrapValidator:
    """Wrap validator: a value pydantic cannot coerce becomes the default."""

    def validate(value: Any, handler: Callable[[Any], Any]) -> Any:
        try:
            return handler(value)
        except PydanticValidationError:
            return default()

    return WrapValidator(validate)


# ---------------------------------------------------------------------------
# Field declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InputField:
    """Base declaration: a name, optional aliases, and its pydantic field."""

    name: str
    _: KW_ONLY
    description: str = ""
    aliases: tuple[str, ...] = ()

    @property
    def keys(self) -> tuple[str, ...]:
        """Raw keys accepted for this field, in lookup order."""
        camel = camel_case(self.name)
        keys = (self.name,) if camel == self.name else (self.name, camel)
        return keys + self.aliases

    def annotation(self) -> Any:
        raise NotImplementedError

    def field_info(self) -> FieldInfo:
        return self._field(None)

    def _field(self, default: Any = ..., **kwargs: Any) -> FieldInfo:
        return Field(
            default,
            validation_alias=AliasChoices(*self.keys),
            description=self.description or None,
            **kwargs,
        )


@dataclass(frozen=True, kw_only=True)
class TextInput(InputField):
    """Free text.  Whitespace is collapsed; blank means absent."""

    required: bool = False
    max_chars: int | None = None

    def _coerce(self, value: Any) -> str | None:
        text = scalar_text(value)
        if self.max_chars is not None:
            text = text[: self.max_chars].rstrip()
        return text or None

    def annotation(self) -> Any:
        if self.required:
            return Annotated[str, BeforeValidator(self._coerce)]
        return Annotated[str | None, BeforeValidator(self._coerce)]

    def field_info(self) -> FieldInfo:
        extra = {"maxLength": self.max_chars} if self.max_chars is not None else None
        if self.required:
            return self._field(json_schema_extra=extra)
        return self._field(None, json_schema_extra=extra)


@dataclass(frozen=True, kw_only=True)
class IntInput(InputField):
    """Integer clamped to ``[minimum, maximum]``; bad input uses ``default``."""

    default: int
    minimum: int | None = None
    maximum: int | None = None

    @staticmethod
    def _number_text(value: Any) -> Any:
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            return value.strip().replace(",", "")
        return value

    def clamp(self, number: int) -> int:
        if self.minimum is not None:
            number = max(self.minimum, number)
        if self.maximum is not None:
            number = min(self.maximum, number)
        return number

    def annotation(self) -> Any:
        return Annotated[
            int,
            or_default(lambda: self.default),
            BeforeValidator(self._number_text),
            AfterValidator(self.clamp),
        ]

    def field_info(self) -> FieldInfo:
        bounds = {"minimum": self.minimum, "maximum": self.maximum}
        return self._field(
            self.default,
            json_schema_extra={k: v for k, v in bounds.items() if v is not None},
        )


@dataclass(frozen=True, kw_only=True)
class EnumInput(InputField):
    """One of ``choices`` (case-insensitive); anything else is treated as absent."""

    choices: tuple[str, ...]
    default: str | None = None

    def _match(self, value: Any) -> Any:
        wanted = scalar_text(value).lower()
        for choice in self.choices:
            if choice.lower() == wanted:
                return choice
        return value

    def annotation(self) -> Any:
        return Annotated[
            Literal[self.choices] | None,
            or_default(lambda: self.default),
            BeforeValidator(self._match),
        ]

    def field_info(self) -> FieldInfo:
        return self._field(self.default)


@dataclass(frozen=True, kw_only=True)
class ListInput(InputField):
    """List of short strings; a comma-separated string is accepted too.

    Items are trimmed, passed through ``item`` when given, blanks
    dropped and case-insensitive duplicates removed.  An empty result
    falls back to ``default`` or is absent.
    """

    default: tuple[str, ...] = ()
    max_items: int = 20
    item_max_chars: int = 100
    item: Callable[[str], str] | None = None

    def _items(self, value: Any) -> tuple[str, ...] | None:
        if isinstance(value, str):
            value = value.split(",")
        elif not isinstance(value, (list, tuple)):
            value = ()
        seen: set[str] = set()
        items: list[str] = []
        for raw in value:
            text = scalar_text(raw)[: self.item_max_chars].strip()
            if self.item is not None:
                text = self.item(text)
            if not text or text.lower() in seen:
                continue
            seen.add(text.lower())
            items.append(text)
            if len(items) == self.max_items:
                break
        if items:
            return tuple(items)
        return self.default or None

    def annotation(self) -> Any:
        return Annotated[tuple[str, ...] | None, BeforeValidator(self._items)]

    def field_info(self) -> FieldInfo:
        return self._field(
            self.default or None, json_schema_extra={"maxItems": self.max_items}
        )


@dataclass(frozen=True, kw_only=True)
class DateInput(InputField):
    """ISO ``YYYY-MM-DD`` date; anything unparseable becomes next Monday."""

    today: Callable[[], date] = date.today

    def fallback(self) -> date:
        return next_monday(self.today())

    @staticmethod
    def _date_text(value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            return value.strip()[:10]
        return None

    def annotation(self) -> Any:
        return Annotated[date, or_default(self.fallback), BeforeValidator(self._date_text)]

    def field_info(self) -> FieldInfo:
        return Field(
            default_factory=self.fallback,
            validation_alias=AliasChoices(*self.keys),
            description=self.description or None,
            json_schema_extra={"format": "date", "default": "next Monday"},
        )


# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------


class ToolInputs(BaseModel):
    """Base of every generated per-tool input model."""

    model_config = ConfigDict(extra="ignore", frozen=True)


def _model_name(tool: str) -> str:
    return "".join(part.title() for part in tool.split("_")) + "Inputs"


@lru_cache(maxsize=None)
def input_model(inputs: tuple[InputField, ...], tool: str = "") -> type[ToolInputs]:
    """Compile input declarations into a pydantic model (cached)."""
    fields: dict[str, Any] = {
        declared.name: (declared.annotation(), declared.field_info())
        for declared in inputs
    }
    return create_model(_model_name(tool), __base__=ToolInputs, **fields)


def input_schema(inputs: Iterable[InputField], tool: str = "") -> dict[str, Any]:
    """JSON schema of a tool's inputs, as advertised in listings."""
    return input_model(tuple(inputs), tool).model_json_schema()


# ---------------------------------------------------------------------------
# RequestConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RequestConfig:
    """Validated, defaulted input for one tool invocation."""

    tool: str
    values: Mapping[str, Any]

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def as_context(self, names: Iterable[str]) -> dict[str, Any]:
        """Template context: absent optional inputs map to ``None``."""
        return {name: self.values.get(name) for name in names}

    def to_dict(self) -> dict[str, Any]:
        return {
            name: list(value) if isinstance(value, tuple) else value
            for name, value in self.values.items()
        }


def _blank_field(inputs: tuple[InputField, ...], exc: PydanticValidationError) -> str:
    by_key = {key: declared.name for declared in inputs for key in declared.keys}
    loc = exc.errors(include_url=False)[0]["loc"]
    return by_key.get(str(loc[0]), str(loc[0])) if loc else ""


def normalize_config(
    inputs: Iterable[InputField],
    raw: Any,
    *,
    tool: str = "",
) -> RequestConfig:
    """Build a ``RequestConfig`` from raw caller input.

    Raises
    ------
    ValidationError
        A required text field is blank after trimming.
    """
    inputs = tuple(inputs)
    if not isinstance(raw, Mapping):
        raw = {}
    try:
        validated = input_model(inputs, tool).model_validate(dict(raw))
    except PydanticValidationError as exc:
        name = _blank_field(inputs, exc)
        raise ValidationError(
            f"'{name}' is required and cannot be blank.", field=name
        ) from None
    values = validated.model_dump(exclude_none=True)
    return RequestConfig(tool=tool, values=MappingProxyType(values))


def config_defaults(inputs: Iterable[InputField], tool: str = "") -> RequestConfig:
    """Config with every optional input at its default (for listings)."""
    model = input_model(tuple(inputs), tool)
    values = {}
    for name, info in model.model_fields.items():
        if info.is_required():
            continue
        value = info.get_default(call_default_factory=True)
        if value is not None:
            values[name] = value
    return RequestConfig(tool=tool, values=MappingProxyType(values))
