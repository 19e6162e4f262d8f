"""Codec — typed values <-> JSON wire trees and flat form parameters.

Invariants:
    - decode_from_wire returns a fully validated value or raises DecodeError
    - Optional fields: missing == null == None; fields annotated EmptyAsNone also
      collapse {} / [] to None (at decode AND at construction)
    - Variants try their shapes in declared order; first signature match wins;
      no match is a decode error naming the tag that was seen
    - Timestamps are whole epoch seconds on the wire, tz-aware UTC in memory
    - Enums decode case-sensitively; unknown values fail
    - Form encoding: None contributes no key; nested values become `a[b][c]`

Design Decisions:
    - pydantic models as the schema layer; ValidationError is converted to
      DecodeError only at the decode_from_wire boundary
    - Empty-as-absent is a per-field annotation, never inferred from the type
    - Variant shape lists are checked against the union at import time, so a new
      union member without a shape fails loudly
    - Form parameters are an httpx.QueryParams multi-dict: repeated `key[]`
      entries need more than a plain dict
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Union, get_args

import httpx
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    PlainSerializer,
    PlainValidator,
    RootModel,
    TypeAdapter,
    ValidationError,
)
from pydantic.fields import FieldInfo
from pydantic_core import PydanticCustomError

from stripe_typed.core.errors import DecodeError
from stripe_typed.core.naming import to_wire_name

WireTree = Union[None, bool, int, float, str, list["WireTree"], dict[str, "WireTree"]]
FormParams = httpx.QueryParams


# ─── Base model ──────────────────────────────────────────────────

class WireModel(BaseModel):
    """Base for every semantic value exchanged with the API."""

    model_config = ConfigDict(
        alias_generator=to_wire_name,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# ─── Field annotations ───────────────────────────────────────────

def _empty_as_none(value: Any) -> Any:
    if isinstance(value, (Mapping, list, tuple)) and len(value) == 0:
        return None
    return value


EmptyAsNone = BeforeValidator(_empty_as_none)


def _decode_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise PydanticCustomError(
                "naive_timestamp", "timestamp must be timezone-aware",
            )
        return value.astimezone(timezone.utc).replace(microsecond=0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise PydanticCustomError(
            "epoch_seconds",
            "expected integer seconds since epoch, got {kind}",
            {"kind": _json_kind(value)},
        )
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise PydanticCustomError(
            "epoch_seconds", "timestamp {value} is out of range", {"value": value},
        )


def _encode_timestamp(value: datetime) -> int:
    return int(value.timestamp())


Timestamp = Annotated[
    datetime,
    PlainValidator(_decode_timestamp),
    PlainSerializer(_encode_timestamp, return_type=int),
]


@dataclass(frozen=True)
class FormList:
    """How a list field flattens into form parameters."""
    repeated: bool = False


IndexedKeys = FormList(repeated=False)    # items[0], items[1]
RepeatedKeys = FormList(repeated=True)    # expand[], expand[]


# ─── Variants ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Shape:
    """One named alternative of a variant: its type and its wire signature."""
    name: str
    type: Any
    matches: Callable[[Any], bool]


def tagged(tag: str, field: str = "object") -> Callable[[Any], bool]:
    """Signature: a JSON object whose discriminator field equals `tag`."""
    def matches(tree: Any) -> bool:
        return isinstance(tree, Mapping) and tree.get(field) == tag
    return matches


def is_string(tree: Any) -> bool:
    return isinstance(tree, str)


def is_integer(tree: Any) -> bool:
    return isinstance(tree, int) and not isinstance(tree, bool)


def is_mapping(tree: Any) -> bool:
    return isinstance(tree, Mapping)


class Variant:
    """Closed set of shapes for one polymorphic wire value."""

    def __init__(
        self, name: str, union: Any, shapes: tuple[Shape, ...], tag_field: str = "object",
    ):
        members = set(get_args(union)) or {union}
        declared = [shape.type for shape in shapes]
        if len(declared) != len(set(declared)) or set(declared) != members:
            raise TypeError(
                f"{name}: shapes {sorted(t.__name__ for t in declared)} do not "
                f"cover union members {sorted(t.__name__ for t in members)} exactly",
            )
        self.name = name
        self.shapes = shapes
        self.types = tuple(declared)
        self.tag_field = tag_field

    def validate(self, value: Any) -> Any:
        if isinstance(value, self.types):
            return value
        for shape in self.shapes:
            if shape.matches(value):
                return _adapter(shape.type).validate_python(value)
        raise PydanticCustomError(
            "unknown_variant", "{detail}", {"detail": self.describe_mismatch(value)},
        )

    def serialize(self, value: Any) -> WireTree:
        return encode_to_wire(value)

    def shape_of(self, value: Any) -> str:
        for shape in self.shapes:
            if isinstance(value, shape.type):
                return shape.name
        raise TypeError(f"{type(value).__name__} is not a {self.name} shape")

    def describe_mismatch(self, value: Any) -> str:
        if isinstance(value, Mapping):
            return (
                f"no {self.name} shape matches "
                f"{self.tag_field}={value.get(self.tag_field)!r}"
            )
        return f"no {self.name} shape matches a JSON {_json_kind(value)}"


def variant(name: str, union: Any, *shapes: Shape, tag_field: str = "object") -> Any:
    """Build an annotated union type decoded by ordered shape signatures."""
    spec = Variant(name, union, shapes, tag_field)
    return Annotated[
        union,
        PlainValidator(spec.validate),
        PlainSerializer(spec.serialize, return_type=Any),
        spec,
    ]


def variant_spec(annotated: Any) -> Variant:
    for item in get_args(annotated)[1:]:
        if isinstance(item, Variant):
            return item
    raise TypeError(f"{annotated!r} was not built with variant()")


# ─── Wire tree ───────────────────────────────────────────────────

@lru_cache(maxsize=None)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


def encode_to_wire(value: Any) -> WireTree:
    """Typed value -> JSON-compatible tree (wire names, absent optionals omitted)."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return _adapter(type(value)).dump_python(
        value, mode="json", by_alias=True, exclude_none=True,
    )


def decode_from_wire(type_: Any, tree: WireTree) -> Any:
    """JSON tree -> typed value of `type_`, or DecodeError."""
    try:
        return _adapter(type_).validate_python(tree)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        raise DecodeError(
            f"Cannot decode {_type_name(type_)}: {_describe(errors)}",
            errors=errors,
            tree=tree,
        ) from exc


# ─── Form parameters ─────────────────────────────────────────────

def encode_form_params(value: Any, prefix: str | None = None) -> FormParams:
    """Typed value (or plain mapping) -> flat bracket-keyed form parameters.

    Model fields use their wire names, unless the value's class sets a
    `__form_key__` (a card object sent as `card[...]` instead of `source[...]`);
    mappings held by a model field (metadata) keep their keys verbatim; keys
    of a plain mapping passed in directly are run through to_wire_name.
    """
    pairs: list[tuple[str, str]] = []
    _flatten(value, prefix, pairs, rename=True, style=None)
    return httpx.QueryParams(pairs)


def _flatten(
    value: Any,
    key: str | None,
    pairs: list[tuple[str, str]],
    rename: bool,
    style: FormList | None,
) -> None:
    if value is None:
        return
    if isinstance(value, RootModel):
        _flatten(value.root, key, pairs, rename, style)
        return
    if isinstance(value, BaseModel):
        for name, info in type(value).model_fields.items():
            item = getattr(value, name)
            wire = getattr(item, "__form_key__", None) or info.alias or to_wire_name(name)
            _flatten(
                item,
                _child(key, wire),
                pairs,
                rename=False,
                style=_form_list(info),
            )
        return
    if isinstance(value, Mapping):
        for name, item in value.items():
            wire = to_wire_name(str(name)) if rename else str(name)
            _flatten(item, _child(key, wire), pairs, rename, style=None)
        return
    if isinstance(value, (list, tuple)):
        if key is None:
            raise TypeError("a list needs a parent key to be form-encoded")
        for index, item in enumerate(value):
            child = f"{key}[]" if style and style.repeated else f"{key}[{index}]"
            _flatten(item, child, pairs, rename, style=None)
        return
    if key is None:
        raise TypeError(f"a bare {type(value).__name__} needs a key to be form-encoded")
    pairs.append((key, _form_scalar(value)))


def _child(parent: str | None, name: str) -> str:
    return name if parent is None else f"{parent}[{name}]"


def _form_list(info: FieldInfo) -> FormList | None:
    for item in info.metadata:
        if isinstance(item, FormList):
            return item
    return None


def _form_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise ValueError("timestamps must be timezone-aware to be form-encoded")
        return str(_encode_timestamp(value))
    if isinstance(value, (str, int, float, Decimal)):
        return str(value)
    raise TypeError(f"cannot form-encode {type(value).__name__}")


# ─── Helpers ─────────────────────────────────────────────────────

def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _type_name(type_: Any) -> str:
    for item in get_args(type_)[1:]:
        if isinstance(item, Variant):
            return item.name
    return getattr(type_, "__name__", None) or repr(type_)


def _describe(errors: list[dict[str, Any]]) -> str:
    if not errors:
        return "invalid value"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    more = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{loc}: {first.get('msg')}{more}"
