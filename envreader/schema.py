"""
Schema description for a target record.
Introspects a dataclass once per read and turns every field into a FieldSpec
holding its declared type and its tag mapping.
"""

import types
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Annotated, Any, Mapping, Union, get_args, get_origin, get_type_hints

from envreader.tags import Bits, Tag

INT_WIDTHS = (8, 16, 32, 64)
FLOAT_WIDTHS = (32, 64)


class FieldKind(Enum):
    """Closed set of field types the coercion engine understands."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST_STRING = "list[string]"
    LIST_INT = "list[int]"
    LIST_FLOAT32 = "list[float32]"
    LIST_FLOAT64 = "list[float64]"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class FieldType:
    kind: FieldKind
    bits: int = 0

    @property
    def name(self) -> str:
        if self.kind is FieldKind.INT:
            return f"int{self.bits}"
        if self.kind is FieldKind.FLOAT:
            return f"float{self.bits}"
        if self.kind is FieldKind.LIST_INT:
            return f"list[int{self.bits}]"
        return self.kind.value


@dataclass(frozen=True)
class FieldSpec:
    """One declared field of the target record."""

    name: str
    type: FieldType
    tags: Mapping[str, str]

    def tag(self, tag_name: str) -> str:
        """Value stored under tag_name, or "" when the field has none."""
        return self.tags.get(tag_name, "")


@dataclass(frozen=True)
class RecordSchema:
    """Ordered field specs of a record, in declaration order."""

    fields: tuple[FieldSpec, ...]

    @classmethod
    def from_record(cls, record: Any) -> "RecordSchema":
        """Build the schema of a dataclass or dataclass instance."""
        if not is_dataclass(record):
            raise TypeError("Record must be a dataclass")
        record_class = record if isinstance(record, type) else type(record)
        hints = get_type_hints(record_class, include_extras=True)

        specs = []
        for f in fields(record_class):
            hint = hints.get(f.name, f.type)
            specs.append(
                FieldSpec(
                    name=f.name,
                    type=field_type_of(hint),
                    tags=_collect_tags(hint, f.metadata),
                )
            )
        return cls(tuple(specs))

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


def _split_annotated(hint: Any) -> tuple[Any, list[Any]]:
    """Unwrap Annotated[X, ...] into (X, extras)."""
    if get_origin(hint) is Annotated:
        args = get_args(hint)
        return args[0], list(args[1:])
    return hint, []


def _unwrap_optional(hint: Any) -> Any:
    """Optional[T] -> T; other unions are left alone."""
    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _width(extras: list[Any], allowed: tuple[int, ...], kind: str) -> int:
    width = 64
    for m in extras:
        if isinstance(m, Bits):
            width = m.width
    if width not in allowed:
        raise ValueError(f"Unsupported {kind} width: {width} (expected one of {allowed})")
    return width


def _element_type(hint: Any) -> FieldType:
    inner, extras = _split_annotated(hint)
    if inner is str:
        return FieldType(FieldKind.LIST_STRING)
    if inner is int:
        return FieldType(FieldKind.LIST_INT, _width(extras, INT_WIDTHS, "int"))
    if inner is float:
        bits = _width(extras, FLOAT_WIDTHS, "float")
        return FieldType(FieldKind.LIST_FLOAT32 if bits == 32 else FieldKind.LIST_FLOAT64)
    return FieldType(FieldKind.UNSUPPORTED)


def field_type_of(hint: Any) -> FieldType:
    """Map a declared type annotation onto its FieldType."""
    hint, extras = _split_annotated(hint)
    hint = _unwrap_optional(hint)
    # Optional[Annotated[...]] carries its extras one level down
    inner, inner_extras = _split_annotated(hint)
    extras = extras + inner_extras
    hint = inner

    # bool before int: bool is an int subclass
    if hint is bool:
        return FieldType(FieldKind.BOOL)
    if hint is int:
        return FieldType(FieldKind.INT, _width(extras, INT_WIDTHS, "int"))
    if hint is float:
        return FieldType(FieldKind.FLOAT, _width(extras, FLOAT_WIDTHS, "float"))
    if hint is str:
        return FieldType(FieldKind.STRING)
    if get_origin(hint) is list:
        args = get_args(hint)
        if len(args) == 1:
            return _element_type(args[0])
    return FieldType(FieldKind.UNSUPPORTED)


def _collect_tags(hint: Any, metadata: Mapping[Any, Any]) -> dict[str, str]:
    """
    Gather tag name -> value for a field.

    Annotated extras come first, then string entries of the dataclass field
    metadata. The first occurrence of a tag name wins.
    """
    tags: dict[str, str] = {}
    extras: list[Any] = []
    while True:
        hint, more = _split_annotated(_unwrap_optional(hint))
        if not more:
            break
        extras.extend(more)

    for m in extras:
        if isinstance(m, Tag):
            tags.setdefault(m.name, m.value)
        elif isinstance(m, Mapping):
            for name, value in m.items():
                if isinstance(name, str) and isinstance(value, str):
                    tags.setdefault(name, value)
    for name, value in (metadata or {}).items():
        if isinstance(name, str) and isinstance(value, str):
            tags.setdefault(name, value)
    return tags
