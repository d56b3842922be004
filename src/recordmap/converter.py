"""
Bidirectional conversion between records and flat string-keyed maps.

Conversion is best-effort. Apart from the ``ok`` flag returned by
``record_to_map`` for non-record input, nothing is raised for field-level
problems: type mismatches, unmatched keys and unwritable fields are skipped
and listed in the returned ``ConversionReport``. A normal return therefore
does NOT mean every field was converted. Enable ``Settings.strict`` to turn
any skip into a ``StrictConversionError``.

Reading a record may modify it: a ``None`` nested record that is flattened
is replaced by a default-constructed instance before its fields are read,
unless ``Settings.materialize_optionals`` is off.
"""

from collections import defaultdict
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .catalog import PREFIX_SEPARATOR, FieldCatalog, FieldDescriptor
from .config import Settings
from .diagnostics import ConversionReport, SkipReason
from .exceptions import NotARecordError, RecordMapError, StrictConversionError
from .introspection import (
    construct_default,
    is_record,
    is_record_type,
    set_field,
    type_name_matches,
    value_type_name,
)
from .logging import get_logger

# Errors raised by setattr on frozen dataclasses (AttributeError) and by
# frozen or assignment-validated pydantic models (ValueError subclasses)
_WRITE_ERRORS = (AttributeError, TypeError, ValueError)


class Converter:
    """Converts records to maps and maps to records using a field catalog."""

    def __init__(
        self,
        catalog: Optional[FieldCatalog] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            catalog: Shared field catalog. A private one is created when omitted.
            settings: Conversion switches. Defaults are used when omitted.
        """
        self.settings = settings if settings is not None else Settings()
        if catalog is None:
            catalog = FieldCatalog(flatten_nested=self.settings.flatten_nested)
        self.catalog = catalog
        self.logger = get_logger(__name__)

    def record_to_map(self, record: Any) -> Tuple[Dict[str, Any], bool]:
        """
        Convert a record to a flat map.

        Flatten-marked nested records contribute their keys as
        ``<field>_<subkey>``; every other field is stored under its name with
        its value as-is.

        Returns:
            Tuple of (map, ok). ``ok`` is False, with an empty map, when
            ``record`` is not a record.
        """
        report = ConversionReport()
        mapping, ok = self._record_to_map(record, report, (), frozenset())
        self._finish("record_to_map", report)
        return mapping, ok

    def map_to_record(self, mapping: Mapping[str, Any], record: Any) -> ConversionReport:
        """
        Populate ``record`` in place from ``mapping``.

        Each key is matched exactly against the record's flattened field names
        and, in addition, case-insensitively against all of them; a value is
        assigned only when its type name equals the field's declared type name.
        One key may therefore populate several fields. Case-insensitive means
        equal after ``str.lower()``: "ss" does not match "ß".

        Raises:
            NotARecordError: ``record`` is not a record instance.
            StrictConversionError: In strict mode, when anything was skipped.
                The error is raised after every assignable field was written,
                so ``record`` may be left partly populated.
        """
        if not is_record(record):
            raise NotARecordError(
                "map_to_record target must be a record instance",
                type_name=value_type_name(record),
            )

        report = ConversionReport()
        lookup = self.catalog.lookup(type(record))
        folded = defaultdict(list)
        for name in lookup:
            folded[name.lower()].append(name)

        for key, value in mapping.items():
            exact = lookup.get(key)
            if exact is not None:
                self._assign(record, exact, key, value, report)
                if self.settings.exclusive_exact_match:
                    continue

            matched = exact is not None
            for name in folded.get(key.lower(), ()):
                if name == key:
                    continue
                matched = True
                self._assign(record, lookup[name], key, value, report)

            if not matched:
                report.skip(SkipReason.UNMATCHED_KEY, key=key, actual_type=value_type_name(value))

        self._finish("map_to_record", report)
        return report

    def maps_to_records(
        self,
        maps: Sequence[Mapping[str, Any]],
        target: List[Any],
        record_type: type,
    ) -> List[Any]:
        """
        Decode ``maps`` into ``target``, one fresh ``record_type`` per map.

        Existing slots of ``target`` are replaced with fresh records and reused;
        more are appended in geometric steps as needed. ``target`` ends with
        exactly ``len(maps)`` entries, in input order, and is returned.

        Raises:
            NotARecordError: ``record_type`` is not a record class.
            RecordMapError: ``record_type`` cannot be default-constructed.
            StrictConversionError: In strict mode, from the first failing map.
        """
        if not is_record_type(record_type):
            raise NotARecordError(
                f"{record_type!r} is not a record type",
                type_name=getattr(record_type, "__name__", None),
            )

        target[:] = [self._new_record(record_type) for _ in target]
        capacity = len(target)

        for i, mapping in enumerate(maps):
            if i >= capacity:
                new_capacity = max(capacity + capacity // 2, 4)
                target.extend(self._new_record(record_type) for _ in range(new_capacity - capacity))
                capacity = new_capacity
            self.map_to_record(mapping, target[i])

        del target[len(maps):]
        return target

    def records_to_maps(self, records: Iterable[Any]) -> List[Dict[str, Any]]:
        """Convert each record to a map, in order, dropping non-record entries."""
        maps = []
        for record in records:
            mapping, ok = self.record_to_map(record)
            if ok:
                maps.append(mapping)
        return maps

    def _record_to_map(
        self,
        record: Any,
        report: ConversionReport,
        prefix: Tuple[str, ...],
        active: FrozenSet[type],
    ) -> Tuple[Dict[str, Any], bool]:
        if not is_record(record):
            return {}, False

        record_type = type(record)
        active = active | {record_type}
        mapping: Dict[str, Any] = {}

        for field in self.catalog.resolve(record_type):
            value = getattr(record, field.attr)
            flatten = field.flatten and field.record_type not in active

            if flatten and value is None:
                if not self.settings.materialize_optionals:
                    continue
                value = self._materialize(record, field, report, prefix)
                if value is None:
                    continue

            if flatten and is_record(value):
                child, ok = self._record_to_map(value, report, prefix + field.path, active)
                if ok:
                    for child_key, child_value in child.items():
                        mapping[field.name + PREFIX_SEPARATOR + child_key] = child_value
            else:
                mapping[field.name] = value

        return mapping, True

    def _assign(
        self,
        record: Any,
        field: FieldDescriptor,
        key: str,
        value: Any,
        report: ConversionReport,
    ) -> None:
        if not type_name_matches(field.type_name, field.optional, value):
            report.skip(
                SkipReason.TYPE_MISMATCH,
                name=field.name,
                key=key,
                path=field.path,
                declared_type=field.type_name,
                actual_type=value_type_name(value),
            )
            return

        owner = record
        for depth, attr in enumerate(field.path[:-1]):
            child = getattr(owner, attr)
            if child is None:
                nested = self.catalog.descriptor(type(owner), attr)
                child = self._materialize(owner, nested, report, field.path[:depth])
                if child is None:
                    return
            owner = child

        try:
            set_field(owner, field.attr, value)
        except _WRITE_ERRORS:
            report.skip(
                SkipReason.NOT_WRITABLE,
                name=field.name,
                key=key,
                path=field.path,
                declared_type=field.type_name,
                actual_type=value_type_name(value),
            )
            return
        report.assigned.append(field.name)

    def _materialize(
        self,
        owner: Any,
        field: FieldDescriptor,
        report: ConversionReport,
        prefix: Tuple[str, ...],
    ) -> Optional[Any]:
        """Replace a None nested record on ``owner`` with a default instance."""
        path = prefix + field.path
        try:
            value = construct_default(field.record_type)
        except (TypeError, ValueError):
            report.skip(
                SkipReason.NOT_CONSTRUCTIBLE,
                name=field.name,
                path=path,
                declared_type=field.type_name,
            )
            return None

        try:
            set_field(owner, field.attr, value)
        except _WRITE_ERRORS:
            report.skip(
                SkipReason.NOT_WRITABLE,
                name=field.name,
                path=path,
                declared_type=field.type_name,
            )
            return None
        return value

    def _new_record(self, record_type: type) -> Any:
        try:
            return construct_default(record_type)
        except (TypeError, ValueError) as e:
            raise RecordMapError(
                f"Cannot construct a default {record_type.__name__}",
                error_code="NOT_CONSTRUCTIBLE",
                details={"type_name": record_type.__name__},
            ) from e

    def _finish(self, operation: str, report: ConversionReport) -> None:
        for skipped in report.skipped:
            self.logger.debug(
                "field_skipped",
                operation=operation,
                field=skipped.name,
                key=skipped.key,
                reason=skipped.reason.value,
            )

        if self.settings.strict and report.skipped:
            self.logger.warning(
                "strict_conversion_failed",
                operation=operation,
                skipped_count=len(report.skipped),
            )
            raise StrictConversionError(
                f"{operation} skipped {len(report.skipped)} field(s)", report=report
            )
