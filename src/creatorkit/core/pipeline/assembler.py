"""Generic shape assembly: raw generation reply -> NormalizedResult.

Walks a tool's declared output fields and, per field, runs the
sanitizer and the cardinality enforcer with the declared fallbacks.
Nothing in here raises for bad model output; every repair is recorded
in a ``RepairLog`` instead.
"""

from __future__ import annotations

import itertools
import logging
from collections import Counter
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from creatorkit.core.service.metrics import FIELD_REPAIRS_TOTAL

from .cardinality import enforce
from .exceptions import ToolSpecError
from .fields import RequestConfig
from .sanitizer import SanitizeOptions, Sanitizer
from .schema import (
    ListField,
    ObjectField,
    ObjectListField,
    OutputField,
    TextField,
    resolve_fallback,
)

logger = logging.getLogger(__name__)

REPAIR_KINDS = ("dropped", "deduplicated", "truncated", "padded", "defaulted")


class RepairLog:
    """Counts soft repairs per (field path, kind) for one tool run."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        self.counts: Counter[tuple[str, str]] = Counter()

    def record(self, path: str, kind: str, count: int = 1) -> None:
        if count <= 0:
            return
        self.counts[(path, kind)] += count
        FIELD_REPAIRS_TOTAL.labels(tool=self.tool, field=path, kind=kind).inc(count)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def summary(self) -> dict[str, int]:
        return {f"{path}:{kind}": n for (path, kind), n in sorted(self.counts.items())}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def _key_part(value: Any) -> str:
    if isinstance(value, list):
        return ",".join(_key_part(v) for v in value)
    return str(value)


class ShapeAssembler:
    """Builds the NormalizedResult for one request config."""

    def __init__(
        self,
        outputs: Sequence[OutputField],
        config: RequestConfig,
        repairs: RepairLog | None = None,
    ) -> None:
        self.outputs = outputs
        self.config = config
        self.repairs = repairs if repairs is not None else RepairLog(config.tool)
        self._sanitizers: dict[SanitizeOptions, Sanitizer] = {}

    def sanitizer(self, options: SanitizeOptions) -> Sanitizer:
        cached = self._sanitizers.get(options)
        if cached is None:
            cached = self._sanitizers[options] = Sanitizer(options, self.config)
        return cached

    def assemble(self, raw: Any) -> dict[str, Any]:
        if not isinstance(raw, Mapping):
            raw = {}
        return {
            declared.name: self._field(declared, raw.get(declared.name), declared.name, 1)
            for declared in self.outputs
        }

    def _field(self, declared: OutputField, value: Any, path: str, n: int) -> Any:
        if isinstance(declared, TextField):
            return self._text(declared, value, path, n)
        if isinstance(declared, ListField):
            return self._list(declared, value, path)
        if isinstance(declared, ObjectListField):
            return self._object_list(declared, value, path)
        if isinstance(declared, ObjectField):
            return self._object(declared, value, path, n)
        raise ToolSpecError(f"Unsupported output field type: {type(declared).__name__}")

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _fallback_text(self, declared: TextField, path: str, n: int) -> str:
        sanitizer = self.sanitizer(declared.options)
        text = sanitizer.clean(resolve_fallback(declared.fallback, n, self.config))
        if not sanitizer.accepts(text):
            raise ToolSpecError(f"Fallback for '{path}' is empty after cleaning.")
        self.repairs.record(path, "defaulted")
        return text

    def _text(self, declared: TextField, value: Any, path: str, n: int) -> str:
        sanitizer = self.sanitizer(declared.options)
        text = sanitizer.clean(value)
        if sanitizer.accepts(text):
            return text
        if not _is_blank(value):
            self.repairs.record(path, "dropped")
        return self._fallback_text(declared, path, n)

    def _list(self, declared: ListField, value: Any, path: str) -> list[str]:
        sanitizer = self.sanitizer(declared.item)
        raw_items = value if isinstance(value, (list, tuple)) else []
        cleaned: list[str] = []
        for raw in raw_items:
            text = sanitizer.clean(raw)
            if sanitizer.accepts(text):
                cleaned.append(text)
        self.repairs.record(path, "dropped", len(raw_items) - len(cleaned))

        if declared.rank_by is not None:
            cleaned.sort(key=lambda text: -declared.rank_by(text, self.config))

        reserved: list[str] = []
        if declared.reserved_from and declared.reserved_from in self.config:
            original = str(self.config[declared.reserved_from])
            reserved = [original, sanitizer.clean(original)]

        def pad(survivors: Sequence[str]) -> Iterator[str]:
            if declared.derive is not None:
                for raw in declared.derive(survivors, self.config):
                    text = sanitizer.clean(raw)
                    yield text if sanitizer.accepts(text) else ""
            for n in itertools.count(len(survivors) + 1):
                text = sanitizer.clean(resolve_fallback(declared.fallback, n, self.config))
                yield text if sanitizer.accepts(text) else ""

        def rescue(survivors: Sequence[str]) -> Iterator[str]:
            for text in sanitizer.fillers():
                yield text if sanitizer.accepts(text) else ""

        minimum, maximum = declared.cardinality.resolve(self.config)
        enforced = enforce(
            cleaned,
            minimum,
            maximum,
            pad=pad,
            rescue=rescue if sanitizer.banned else None,
            reserved=reserved,
        )
        self._record_enforced(path, enforced)
        return enforced.items

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _object(
        self, declared: ObjectField, value: Any, path: str, n: int
    ) -> dict[str, Any]:
        if not isinstance(value, Mapping):
            value = {}
        return {
            member.name: self._field(
                member, value.get(member.name), f"{path}.{member.name}", n
            )
            for member in declared.fields
        }

    def _item(
        self,
        declared: ObjectListField,
        value: Any,
        path: str,
        n: int,
        padding: bool = False,
    ) -> dict[str, Any] | None:
        """Assemble one array entry, or ``None`` when it must be dropped.

        Model entries are dropped when they are not objects, when every
        sub-field is blank, or when a supplied string sub-field fails its
        length checks.  Blank sub-fields take their own fallback.
        """
        if not isinstance(value, Mapping):
            if not padding:
                return None
            value = {}
        if not padding and all(_is_blank(value.get(m.name)) for m in declared.fields):
            return None
        item: dict[str, Any] = {}
        for member in declared.fields:
            raw = value.get(member.name)
            member_path = f"{path}.{member.name}"
            if isinstance(member, TextField):
                sanitizer = self.sanitizer(member.options)
                text = sanitizer.clean(raw)
                if sanitizer.accepts(text):
                    item[member.name] = text
                elif text and not padding:
                    return None
                else:
                    item[member.name] = self._fallback_text(member, member_path, n)
            else:
                item[member.name] = self._field(member, raw, member_path, n)
        return item

    def _object_list(
        self, declared: ObjectListField, value: Any, path: str
    ) -> list[dict[str, Any]]:
        raw_items = value if isinstance(value, (list, tuple)) else []
        items: list[dict[str, Any]] = []
        for n, raw in enumerate(raw_items, start=1):
            item = self._item(declared, raw, path, n)
            if item is not None:
                items.append(self._repair(declared, item, len(items)))
        self.repairs.record(path, "dropped", len(raw_items) - len(items))

        def key(item: dict[str, Any] | None) -> str:
            if item is None:
                return ""
            return "|".join(_key_part(item[name]) for name in declared.key_fields)

        def pad(survivors: Sequence[dict[str, Any]]) -> Iterator[dict[str, Any] | None]:
            positions = itertools.count(len(survivors) + 1)
            if declared.derive is not None:
                for raw in declared.derive(survivors, self.config):
                    n = next(positions)
                    item = self._item(declared, raw, path, n, padding=True)
                    yield self._repair(declared, item, n - 1)
            for n in positions:
                raw = declared.fallback(n, self.config) if declared.fallback else {}
                item = self._item(declared, raw, path, n, padding=True)
                yield self._repair(declared, item, n - 1)

        minimum, maximum = declared.cardinality.resolve(self.config)
        enforced = enforce(items, minimum, maximum, key=key, pad=pad)
        self._record_enforced(path, enforced)
        return enforced.items

    def _repair(
        self, declared: ObjectListField, item: dict[str, Any] | None, index: int
    ) -> dict[str, Any] | None:
        if item is None or declared.repair is None:
            return item
        return declared.repair(item, index, self.config)

    def _record_enforced(self, path: str, enforced: Any) -> None:
        self.repairs.record(path, "deduplicated", enforced.deduplicated)
        self.repairs.record(path, "truncated", enforced.truncated)
        self.repairs.record(path, "padded", enforced.padded)
        if enforced.padded:
            logger.warning(
                "Padded %s.%s with %d synthetic entries",
                self.config.tool,
                path,
                enforced.padded,
            )
