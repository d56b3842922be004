"""
Field catalog: per-type field metadata, resolved once and cached.

Resolving a record type walks its declared fields and produces one
``FieldDescriptor`` per field. The result is cached by type identity, so a
type converted many times pays the introspection cost only on first use.
The catalog also caches the flattened name lookup used when writing maps
back into records.
"""

import dataclasses
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from .exceptions import NotARecordError
from .introspection import declared_fields, is_record_type, type_name, unwrap_optional
from .logging import get_logger

PREFIX_SEPARATOR = "_"

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldDescriptor:
    """Resolved metadata for one record field."""

    path: Tuple[str, ...]
    name: str
    flatten: bool = False
    declared_type: Any = Any
    optional: bool = False
    record_type: Optional[type] = None
    type_name: str = "Any"

    @property
    def attr(self) -> str:
        """Attribute name of the field on its immediate owner."""
        return self.path[-1]

    def rebase(self, prefix: Tuple[str, ...]) -> "FieldDescriptor":
        """Copy with ``prefix`` prepended to the path."""
        return dataclasses.replace(self, path=prefix + self.path)


class FieldCatalog:
    """
    Thread-safe cache of resolved field descriptors keyed by record type.

    Entries are immutable once built and shared by every caller. Use one
    catalog per process (or per converter configuration) and pass it by
    reference; ``reset`` exists for test harnesses that reuse type names.
    """

    def __init__(self, flatten_nested: bool = True):
        """
        Args:
            flatten_nested: Flatten nested record fields that carry no
                explicit flatten marker.
        """
        self.flatten_nested = flatten_nested
        self._fields: Dict[type, Tuple[FieldDescriptor, ...]] = {}
        self._lookups: Dict[type, Mapping[str, FieldDescriptor]] = {}
        self._lock = threading.RLock()

    def resolve(self, record_type: type) -> Tuple[FieldDescriptor, ...]:
        """
        Return the ordered field descriptors of ``record_type``.

        Raises:
            NotARecordError: ``record_type`` is not a record class.
        """
        fields = self._fields.get(record_type)
        if fields is not None:
            return fields

        with self._lock:
            fields = self._fields.get(record_type)
            if fields is None:
                fields = self._build_fields(record_type)
                self._fields[record_type] = fields
        return fields

    def lookup(self, record_type: type) -> Mapping[str, FieldDescriptor]:
        """
        Return the flattened name lookup of ``record_type``.

        Flatten-marked nested record fields contribute their own entries under
        ``<parent>_<child>`` keys, with paths rooted at ``record_type``, so a
        single lookup reaches any nested storage slot directly.
        """
        table = self._lookups.get(record_type)
        if table is not None:
            return table

        with self._lock:
            table = self._lookups.get(record_type)
            if table is None:
                table = MappingProxyType(self._build_lookup(record_type, (), frozenset()))
                self._lookups[record_type] = table
        return table

    def descriptor(self, record_type: type, attr: str) -> FieldDescriptor:
        """Return the descriptor of attribute ``attr`` on ``record_type``."""
        for field in self.resolve(record_type):
            if field.attr == attr:
                return field
        raise KeyError(f"{record_type.__name__} has no field {attr!r}")

    def reset(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._fields.clear()
            self._lookups.clear()

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def _build_fields(self, record_type: type) -> Tuple[FieldDescriptor, ...]:
        if not is_record_type(record_type):
            raise NotARecordError(
                f"{record_type!r} is not a record type",
                type_name=getattr(record_type, "__name__", type(record_type).__name__),
            )

        fields = []
        for declared in declared_fields(record_type):
            inner, optional = unwrap_optional(declared.annotation)
            nested = inner if is_record_type(inner) else None

            flatten = False
            if nested is not None:
                flatten = self.flatten_nested if declared.flatten is None else bool(declared.flatten)

            fields.append(
                FieldDescriptor(
                    path=(declared.attr,),
                    name=declared.key or declared.attr,
                    flatten=flatten,
                    declared_type=inner,
                    optional=optional,
                    record_type=nested,
                    type_name=type_name(inner),
                )
            )

        logger.debug(
            "field_catalog_built",
            record_type=record_type.__name__,
            field_count=len(fields),
        )
        return tuple(fields)

    def _build_lookup(
        self,
        record_type: type,
        prefix: Tuple[str, ...],
        active: FrozenSet[type],
    ) -> Dict[str, FieldDescriptor]:
        active = active | {record_type}
        table: Dict[str, FieldDescriptor] = {}

        for field in self.resolve(record_type):
            if field.flatten and field.record_type not in active:
                children = self._build_lookup(field.record_type, prefix + field.path, active)
                for child_name, child in children.items():
                    name = field.name + PREFIX_SEPARATOR + child_name
                    table[name] = dataclasses.replace(child, name=name)
            else:
                # Leaves, unflattened records, and types already being
                # flattened on this branch each get a single entry
                table[field.name] = dataclasses.replace(
                    field.rebase(prefix), flatten=False
                )

        return table
