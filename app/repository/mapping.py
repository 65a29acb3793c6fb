"""Voyage CMS - Entity Mapping Definitions.

An ``EntityMapping`` tells the generic repository how one entity type is
stored: which wire field lands in which column, which fields are required,
which carry structured data, how the list endpoint filters, and which fields
reference hosted assets. Mappings are checked against their table model when
declared, so a missing or misspelt column fails at import time.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple, Type

from sqlmodel import SQLModel

from app.repository.codecs import JSONListCodec

SYSTEM_COLUMNS = frozenset({"id", "created_at", "updated_at"})


class AssetKind(str, Enum):
    """Resource kind understood by the asset store."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class FieldSpec:
    """One wire field <-> one storage column."""

    wire: str
    column: str
    codec: Optional[JSONListCodec] = None
    required: bool = False
    default: Any = None  # value, or callable(payload) -> value
    updatable: bool = True
    choices: Optional[FrozenSet[str]] = None
    normalize: Optional[Callable[[Any], Any]] = None
    aliases: Tuple[str, ...] = ()

    def default_for(self, payload: Dict[str, Any]) -> Any:
        if callable(self.default):
            return self.default(payload)
        return self.default


@dataclass(frozen=True)
class FilterSpec:
    """A list-endpoint filter beyond status and pagination."""

    wire: str
    column: str
    match: str = "exact"  # exact | contains
    cast: Callable[[Any], Any] = str


@dataclass(frozen=True)
class AssetSlot:
    """Wire fields that reference hosted assets.

    Single slots pair one URL with one handle. Multi slots pair a URL list
    with a handle list; handles are compared by identity, not position.
    """

    url_field: str
    handle_field: str
    kind: AssetKind = AssetKind.IMAGE
    multiple: bool = False


@dataclass(frozen=True)
class EntityMapping:
    name: str
    label: str
    key: str
    collection_key: str
    path: str
    model: Type[SQLModel]
    fields: Tuple[FieldSpec, ...]
    filters: Tuple[FilterSpec, ...] = ()
    assets: Tuple[AssetSlot, ...] = ()
    visible_status: Optional[str] = "active"
    order_by: str = "created_at"
    descending: bool = True
    slug_field: Optional[str] = None
    _by_wire: Dict[str, FieldSpec] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self):
        self._by_wire.update({spec.wire: spec for spec in self.fields})
        validate_mapping(self)

    def spec_for(self, wire: str) -> Optional[FieldSpec]:
        return self._by_wire.get(wire)

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return tuple(spec.wire for spec in self.fields if spec.required)


class MappingError(Exception):
    """Raised when a mapping does not match its table model."""


def validate_mapping(mapping: EntityMapping) -> None:
    """Check that ``mapping`` covers its model exactly."""
    model_columns = set(mapping.model.model_fields) - SYSTEM_COLUMNS
    mapped = [spec.column for spec in mapping.fields]

    unknown = sorted(set(mapped) - model_columns)
    if unknown:
        raise MappingError(f"{mapping.name}: unknown columns {unknown}")
    unmapped = sorted(model_columns - set(mapped))
    if unmapped:
        raise MappingError(f"{mapping.name}: unmapped columns {unmapped}")
    if len(mapped) != len(set(mapped)):
        raise MappingError(f"{mapping.name}: a column is mapped twice")

    wires = {spec.wire for spec in mapping.fields}
    for flt in mapping.filters:
        if flt.column not in model_columns:
            raise MappingError(f"{mapping.name}: filter on unknown column {flt.column}")
        if flt.match not in ("exact", "contains"):
            raise MappingError(f"{mapping.name}: unknown match mode {flt.match}")
    for slot in mapping.assets:
        for wire in (slot.url_field, slot.handle_field):
            if wire not in wires:
                raise MappingError(f"{mapping.name}: asset slot field {wire} unmapped")
        if slot.multiple and not (
            mapping._by_wire[slot.url_field].codec
            and mapping._by_wire[slot.handle_field].codec
        ):
            raise MappingError(
                f"{mapping.name}: multi-asset slot {slot.url_field} needs list codecs"
            )
    if mapping.slug_field and mapping.slug_field not in wires:
        raise MappingError(f"{mapping.name}: slug field {mapping.slug_field} unmapped")
    if mapping.order_by not in model_columns | SYSTEM_COLUMNS:
        raise MappingError(f"{mapping.name}: cannot order by {mapping.order_by}")
