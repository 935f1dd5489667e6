"""Output shape declarations and the schema description sent with a prompt.

A tool's output is a tuple of fields:

* ``TextField`` -- one cleaned string, never empty (declared fallback).
* ``ListField`` -- an array of cleaned strings with a ``Cardinality``.
* ``ObjectField`` -- a fixed object whose members are any of these fields.
* ``ObjectListField`` -- an array of objects with a ``Cardinality`` and a
  composite de-duplication key.

``describe`` resolves the declarations against one ``RequestConfig``
into a ``SchemaDescription``: the concrete field names, kinds, counts
and length limits the model is asked to honour.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import KW_ONLY, dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .cardinality import Cardinality
from .exceptions import ToolSpecError
from .fields import RequestConfig
from .sanitizer import SanitizeOptions, resolve_limit

# A ``str.format`` template (``{n}`` is the 1-based position, input values
# are available by name) or a function of (position, config).
Fallback = str | Callable[[int, RequestConfig], Any]

# Extra candidates tried before the numbered fallback when padding.
Derive = Callable[[Sequence[Any], RequestConfig], Iterable[Any]]


def resolve_fallback(fallback: Fallback | None, n: int, config: RequestConfig) -> Any:
    if fallback is None:
        return ""
    if callable(fallback):
        return fallback(n, config)
    return fallback.format(n=n, **config.values)


def phrases(*texts: str, then: str) -> Callable[[int, RequestConfig], str]:
    """Fallback yielding ``texts`` by position, then the numbered ``then``."""

    def fallback(n: int, config: RequestConfig) -> str:
        text = texts[n - 1] if 1 <= n <= len(texts) else then
        return text.format(n=n, **config.values)

    return fallback


# ---------------------------------------------------------------------------
# Field declarations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OutputField:
    name: str
    _: KW_ONLY
    description: str = ""

    def references(self) -> tuple[str, ...]:
        return ()


@dataclass(frozen=True, kw_only=True)
class TextField(OutputField):
    options: SanitizeOptions = SanitizeOptions()
    fallback: Fallback | None = None

    def references(self) -> tuple[str, ...]:
        return self.options.references()


@dataclass(frozen=True, kw_only=True)
class ListField(OutputField):
    cardinality: Cardinality
    item: SanitizeOptions = SanitizeOptions()
    fallback: Fallback | None = None
    derive: Derive | None = None
    reserved_from: str | None = None
    rank_by: Callable[[str, RequestConfig], int] | None = None

    def references(self) -> tuple[str, ...]:
        refs = self.item.references() + self.cardinality.references()
        return refs + ((self.reserved_from,) if self.reserved_from else ())


@dataclass(frozen=True, kw_only=True)
class ObjectField(OutputField):
    fields: tuple[OutputField, ...]

    def references(self) -> tuple[str, ...]:
        return tuple(ref for member in self.fields for ref in member.references())


@dataclass(frozen=True, kw_only=True)
class ObjectListField(OutputField):
    fields: tuple[OutputField, ...]
    cardinality: Cardinality
    key_fields: tuple[str, ...]
    fallback: Callable[[int, RequestConfig], Mapping[str, Any]] | None = None
    derive: Derive | None = None
    # Applied to every assembled entry with its 0-based position, before
    # de-duplication.
    repair: Callable[[dict[str, Any], int, RequestConfig], dict[str, Any]] | None = None

    def __post_init__(self) -> None:
        names = {member.name for member in self.fields}
        unknown = set(self.key_fields) - names
        if not self.key_fields or unknown:
            raise ToolSpecError(
                f"'{self.name}' key fields {sorted(unknown) or '()'} "
                "must name declared sub-fields."
            )

    def references(self) -> tuple[str, ...]:
        refs = tuple(ref for member in self.fields for ref in member.references())
        return refs + self.cardinality.references()


# ---------------------------------------------------------------------------
# JSON schema models
# ---------------------------------------------------------------------------


class JsonSchemaNode(BaseModel):
    """One node of the JSON schema advertised for a tool's output."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["object", "array", "string"]
    description: str | None = None
    properties: dict[str, JsonSchemaNode] | None = None
    required: list[str] | None = None
    items: JsonSchemaNode | None = None
    min_items: int | None = Field(default=None, alias="minItems")
    max_items: int | None = Field(default=None, alias="maxItems")

    def dump(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Schema description
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldDescription:
    """One resolved output field: name, kind, count and limits."""

    name: str
    kind: str  # string | string-array | object | object-array
    description: str = ""
    count: tuple[int, int] | None = None
    count_text: str = ""
    limits: tuple[str, ...] = ()
    fields: tuple[FieldDescription, ...] = ()

    def render(self, indent: str = "") -> list[str]:
        limits = f" ({', '.join(self.limits)})" if self.limits else ""
        note = f" -- {self.description}" if self.description else ""
        if self.kind == "string-array":
            head = f'{indent}- "{self.name}": array of {self.count_text} strings{limits}{note}'
        elif self.kind == "object-array":
            head = (
                f'{indent}- "{self.name}": array of {self.count_text} objects'
                f"{note}, each with keys:"
            )
        elif self.kind == "object":
            head = f'{indent}- "{self.name}": an object{note} with keys:'
        else:
            head = f'{indent}- "{self.name}": a string{limits}{note}'
        lines = [head]
        for member in self.fields:
            lines.extend(member.render(indent + "  "))
        return lines

    def schema_node(self) -> JsonSchemaNode:
        if self.kind in ("object", "object-array"):
            node = JsonSchemaNode(
                type="object",
                properties={m.name: m.schema_node() for m in self.fields},
                required=[m.name for m in self.fields],
            )
        else:
            node = JsonSchemaNode(type="string")
        if self.kind.endswith("array"):
            minimum, maximum = self.count or (0, 0)
            node = JsonSchemaNode(
                type="array", items=node, min_items=minimum, max_items=maximum
            )
        if self.description:
            node.description = self.description
        return node


@dataclass(frozen=True)
class SchemaDescription:
    """The declared output shape sent alongside every rendered prompt."""

    fields: tuple[FieldDescription, ...]

    def __bool__(self) -> bool:
        return bool(self.fields)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(member.name for member in self.fields)

    def render(self) -> str:
        lines = [
            "Respond ONLY with a valid JSON object with exactly these keys:",
        ]
        for member in self.fields:
            lines.extend(member.render())
        lines.append(
            "Do not include any explanations, extra text, or formatting "
            "outside of the JSON."
        )
        return "\n".join(lines)

    def to_json_schema(self) -> dict[str, Any]:
        node = JsonSchemaNode(
            type="object",
            properties={m.name: m.schema_node() for m in self.fields},
            required=list(self.names),
        )
        return node.dump()


def _limits(options: SanitizeOptions, config: RequestConfig | None) -> tuple[str, ...]:
    limits = []
    max_words = resolve_limit(options.max_words, config)
    if max_words:
        limits.append(f"at most {max_words} words")
    max_chars = resolve_limit(options.max_chars, config)
    if max_chars:
        limits.append(f"at most {max_chars} characters")
    if options.hashtag:
        limits.append("'#' followed by lowercase letters, digits or underscores")
    if options.title_case:
        limits.append("Title Case")
    if options.strip_tags:
        limits.append("no hashtags or mentions")
    return tuple(limits)


def describe_field(
    declared: OutputField, config: RequestConfig | None = None
) -> FieldDescription:
    if isinstance(declared, TextField):
        return FieldDescription(
            declared.name,
            "string",
            declared.description,
            limits=_limits(declared.options, config),
        )
    if isinstance(declared, ListField):
        return FieldDescription(
            declared.name,
            "string-array",
            declared.description,
            count=declared.cardinality.resolve(config),
            count_text=declared.cardinality.describe(config),
            limits=_limits(declared.item, config),
        )
    if isinstance(declared, ObjectListField):
        return FieldDescription(
            declared.name,
            "object-array",
            declared.description,
            count=declared.cardinality.resolve(config),
            count_text=declared.cardinality.describe(config),
            fields=tuple(describe_field(m, config) for m in declared.fields),
        )
    if isinstance(declared, ObjectField):
        return FieldDescription(
            declared.name,
            "object",
            declared.description,
            fields=tuple(describe_field(m, config) for m in declared.fields),
        )
    raise ToolSpecError(f"Unsupported output field type: {type(declared).__name__}")


def describe(
    outputs: Iterable[OutputField], config: RequestConfig | None = None
) -> SchemaDescription:
    """Resolve output declarations against *config*."""
    return SchemaDescription(tuple(describe_field(f, config) for f in outputs))
