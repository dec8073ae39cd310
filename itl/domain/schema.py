"""Name-mapping table between plist document keys and entity fields.

Every entity field that is read from the document is declared with one of the
helpers below (``text``, ``integer``, ``flag`` ...). The helper records the
document key and the field kind in the dataclass field metadata, and
``schema_for`` turns those declarations into an ordered, static table of
``FieldSpec`` rows. The same table drives decoding and by-name field access.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from functools import lru_cache
from operator import attrgetter
from typing import Any, Callable, Dict, Optional, Tuple

PLIST_KEY = "plist_key"
PLIST_KIND = "plist_kind"
PLIST_ENTITY = "plist_entity"


class FieldKind(str, Enum):
    """Value kinds understood by the decoder and the typed accessors."""

    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DATE = "date"
    DATA = "data"
    MAPPING = "mapping"
    LIST = "list"


@dataclass(frozen=True)
class FieldSpec:
    """One row of the mapping table: field identifier, document key and kind."""

    name: str
    key: str
    kind: FieldKind
    entity: Optional[type] = None


def _declare(key: str, kind: FieldKind, entity: Optional[type] = None, **kwargs: Any):
    metadata = {PLIST_KEY: key, PLIST_KIND: kind}
    if entity is not None:
        metadata[PLIST_ENTITY] = entity
    return field(metadata=metadata, **kwargs)


def text(key: str):
    return _declare(key, FieldKind.TEXT, default="")


def integer(key: str):
    return _declare(key, FieldKind.INTEGER, default=0)


def flag(key: str):
    return _declare(key, FieldKind.BOOLEAN, default=False)


def timestamp(key: str):
    return _declare(key, FieldKind.DATE, default=None)


def data(key: str):
    return _declare(key, FieldKind.DATA, default=None)


def mapping_of(key: str, entity: type):
    """Dictionary of string keys to ``entity`` values."""
    return _declare(key, FieldKind.MAPPING, entity, default_factory=dict)


def list_of(key: str, entity: type):
    """Ordered sequence of ``entity`` values."""
    return _declare(key, FieldKind.LIST, entity, default_factory=list)


@lru_cache(maxsize=None)
def schema_for(entity_type: type) -> Tuple[FieldSpec, ...]:
    """Return the mapping table for an entity dataclass, in declaration order."""
    specs = []
    for f in fields(entity_type):
        kind = f.metadata.get(PLIST_KIND)
        if kind is None:
            continue
        specs.append(
            FieldSpec(
                name=f.name,
                key=f.metadata[PLIST_KEY],
                kind=kind,
                entity=f.metadata.get(PLIST_ENTITY),
            )
        )
    return tuple(specs)


@lru_cache(maxsize=None)
def _specs_by_name(entity_type: type) -> Dict[str, FieldSpec]:
    index: Dict[str, FieldSpec] = {}
    # Document keys first so that an identifier always wins over a key spelled the same.
    for spec in schema_for(entity_type):
        index[spec.key] = spec
    for spec in schema_for(entity_type):
        index[spec.name] = spec
    return index


def find_field(entity_type: type, name: str) -> Optional[FieldSpec]:
    """Look up a field by identifier (``track_number``) or document key (``Track Number``)."""
    return _specs_by_name(entity_type).get(name)


@lru_cache(maxsize=None)
def accessor_table(entity_type: type, kind: FieldKind) -> Dict[str, Callable[[Any], Any]]:
    """Getter functions for every field of ``kind``, addressable by identifier or key."""
    return {
        name: attrgetter(spec.name)
        for name, spec in _specs_by_name(entity_type).items()
        if spec.kind is kind
    }
