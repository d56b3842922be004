"""
Record-shape introspection.

A record is an instance of a ``@dataclass`` class or of a pydantic
``BaseModel`` subclass. This module is the only place that knows how either
kind declares its fields, naming overrides and flatten markers:

    # dataclass: appears in maps as "myName", never as "field"
    field: int = dataclasses.field(default=0, metadata={"key": "myName"})

    # pydantic: alias, or an explicit key in json_schema_extra
    field: int = Field(default=0, alias="myName")
    address: Address = Field(default_factory=Address, json_schema_extra={"flatten": False})
"""

import dataclasses
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

NONE_TYPE = type(None)
ANY_TYPE_NAME = "Any"

_UNION_TYPES: Tuple[Any, ...] = (typing.Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES += (types.UnionType,)


@dataclass(frozen=True)
class DeclaredField:
    """A field as declared on a record class, before catalog resolution."""

    attr: str
    annotation: Any
    key: Optional[str] = None
    flatten: Optional[bool] = None


def is_record_type(tp: Any) -> bool:
    """Return True if ``tp`` is a record class."""
    if not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return issubclass(tp, BaseModel)


def is_record(value: Any) -> bool:
    """Return True if ``value`` is a record instance (not a record class)."""
    return not isinstance(value, type) and is_record_type(type(value))


def declared_fields(record_type: type) -> List[DeclaredField]:
    """List the declared fields of a record class in declaration order."""
    if dataclasses.is_dataclass(record_type):
        return _dataclass_fields(record_type)
    return _model_fields(record_type)


def _annotation_namespaces(record_type: type) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Namespaces for resolving string annotations of a dataclass.

    Besides the module globals, the locals hold the class body, the class
    itself and the types of field defaults, so classes declared inside a
    function still resolve when their annotations are postponed.
    """
    module = sys.modules.get(record_type.__module__)
    globalns = dict(vars(module)) if module is not None else {}

    localns: Dict[str, Any] = {}
    for f in dataclasses.fields(record_type):
        if isinstance(f.default_factory, type):
            localns[f.default_factory.__name__] = f.default_factory
        if f.default is not dataclasses.MISSING and f.default is not None:
            localns.setdefault(type(f.default).__name__, type(f.default))
    localns.update(vars(record_type))
    localns[record_type.__name__] = record_type
    return globalns, localns


def _resolve_annotation(annotation: Any, globalns: Dict[str, Any], localns: Dict[str, Any]) -> Any:
    """Evaluate one string annotation, leaving it as a string if it cannot be resolved."""
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns, localns)  # noqa: S307
    except (NameError, AttributeError, SyntaxError, TypeError):
        return annotation


def _dataclass_fields(record_type: type) -> List[DeclaredField]:
    globalns, localns = _annotation_namespaces(record_type)
    try:
        hints = typing.get_type_hints(record_type, globalns=globalns, localns=localns)
    except (NameError, AttributeError, SyntaxError, TypeError):
        # Resolve field by field so one bad annotation does not spoil the rest
        hints = {
            f.name: _resolve_annotation(f.type, globalns, localns)
            for f in dataclasses.fields(record_type)
        }

    declared = []
    for f in dataclasses.fields(record_type):
        declared.append(
            DeclaredField(
                attr=f.name,
                annotation=hints.get(f.name, f.type),
                key=f.metadata.get("key"),
                flatten=f.metadata.get("flatten"),
            )
        )
    return declared


def _model_fields(record_type: type) -> List[DeclaredField]:
    declared = []
    for attr, info in record_type.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        declared.append(
            DeclaredField(
                attr=attr,
                annotation=info.annotation,
                key=extra.get("key") or info.alias,
                flatten=extra.get("flatten"),
            )
        )
    return declared


def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """
    Strip an ``Optional`` wrapper from an annotation.

    Returns:
        Tuple of (inner annotation, whether None was admitted). Unions with
        more than one non-None member are returned unchanged apart from the
        None member.
    """
    if annotation is NONE_TYPE:
        return annotation, True
    if typing.get_origin(annotation) not in _UNION_TYPES:
        return annotation, False

    args = typing.get_args(annotation)
    members = tuple(arg for arg in args if arg is not NONE_TYPE)
    optional = len(members) != len(args)
    if len(members) == 1:
        return members[0], optional
    if optional:
        return typing.Union[members], True
    return annotation, False


def type_name(annotation: Any) -> str:
    """
    Name of a declared type, as compared against runtime value type names.

    An annotation left unresolved compares by its bare name ("mod.Widget"
    gives "Widget"); anything more complex than a dotted name becomes ``Any``.
    """
    if annotation is Any:
        return ANY_TYPE_NAME
    if isinstance(annotation, str):
        bare = annotation.strip().rsplit(".", 1)[-1]
        if bare.isidentifier() and all(part.isidentifier() for part in annotation.strip().split(".")):
            return bare
        return ANY_TYPE_NAME
    origin = typing.get_origin(annotation)
    if origin in _UNION_TYPES:
        return " | ".join(type_name(arg) for arg in typing.get_args(annotation))
    if origin is not None:
        annotation = origin
    return getattr(annotation, "__name__", None) or repr(annotation)


def value_type_name(value: Any) -> str:
    return type(value).__name__


def type_name_matches(declared: str, optional: bool, value: Any) -> bool:
    """
    Same-type check applied before assignment.

    ``Any`` accepts everything, ``None`` is accepted only by optional fields,
    otherwise the runtime type name must equal the declared name (or one of
    the member names of a declared union).
    """
    if declared == ANY_TYPE_NAME:
        return True
    if value is None:
        return optional
    return value_type_name(value) in declared.split(" | ")


def construct_default(record_type: type) -> Any:
    """
    Build a record with all-default field values.

    Raises:
        TypeError: The dataclass has required fields.
        ValueError: The pydantic model has required fields.
    """
    return record_type()


def set_field(record: Any, attr: str, value: Any) -> None:
    """
    Assign a field on a record.

    Raises:
        AttributeError: The record is a frozen dataclass.
        ValueError: The record is a frozen or assignment-validated model.
    """
    setattr(record, attr, value)
