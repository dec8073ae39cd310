"""Populate library entities from a decoded property-list tree."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Tuple, Type, TypeVar

from itl.domain.errors import DecodeError
from itl.domain.schema import FieldKind, FieldSpec, schema_for

T = TypeVar("T")

_SCALAR_TYPES: Dict[FieldKind, Tuple[type, ...]] = {
    FieldKind.TEXT: (str,),
    FieldKind.INTEGER: (int,),
    FieldKind.BOOLEAN: (bool,),
    FieldKind.DATE: (datetime,),
    FieldKind.DATA: (bytes, bytearray),
}

_PLIST_TYPE_NAMES = {
    dict: "dict",
    list: "array",
    str: "string",
    int: "integer",
    float: "real",
    bool: "boolean",
    bytes: "data",
    bytearray: "data",
    datetime: "date",
}


def _describe(value: Any) -> str:
    return _PLIST_TYPE_NAMES.get(type(value), type(value).__name__)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def bind(entity_type: Type[T], tree: Any, path: str = "") -> T:
    """Build an ``entity_type`` instance from a plist dictionary.

    Keys are matched through the entity's mapping table; unknown keys are
    ignored and missing ones keep the field default. Any value whose type does
    not match its field kind raises ``DecodeError`` naming the document path.
    """
    if not isinstance(tree, dict):
        raise DecodeError(f"expected dict, got {_describe(tree)}", path)

    values = {}
    for spec in schema_for(entity_type):
        if spec.key in tree:
            values[spec.name] = _bind_value(spec, tree[spec.key], _join(path, spec.key))
    return entity_type(**values)


def _bind_value(spec: FieldSpec, value: Any, path: str) -> Any:
    if spec.kind is FieldKind.MAPPING:
        if not isinstance(value, dict):
            raise DecodeError(f"expected dict, got {_describe(value)}", path)
        return {
            str(key): bind(spec.entity, item, _join(path, str(key)))
            for key, item in value.items()
        }

    if spec.kind is FieldKind.LIST:
        if not isinstance(value, list):
            raise DecodeError(f"expected array, got {_describe(value)}", path)
        return [bind(spec.entity, item, _join(path, str(i))) for i, item in enumerate(value)]

    # bool is an int subclass; it must not pass for an integer.
    if spec.kind is FieldKind.INTEGER and isinstance(value, bool):
        raise DecodeError("expected integer, got boolean", path)
    if not isinstance(value, _SCALAR_TYPES[spec.kind]):
        raise DecodeError(f"expected {spec.kind.value}, got {_describe(value)}", path)
    if isinstance(value, bytearray):
        return bytes(value)
    return value
