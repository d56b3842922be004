"""Skipped-field diagnostics collected during conversion."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SkipReason(str, Enum):
    """Why a field or key was left out of a conversion."""

    TYPE_MISMATCH = "type_mismatch"
    UNMATCHED_KEY = "unmatched_key"
    NOT_WRITABLE = "not_writable"
    NOT_CONSTRUCTIBLE = "not_constructible"


@dataclass(frozen=True)
class SkippedField:
    """One field or map key that a conversion did not carry over."""

    reason: SkipReason
    name: Optional[str] = None
    key: Optional[str] = None
    path: Tuple[str, ...] = ()
    declared_type: Optional[str] = None
    actual_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reason": self.reason.value,
            "name": self.name,
            "key": self.key,
            "path": ".".join(self.path),
            "declared_type": self.declared_type,
            "actual_type": self.actual_type,
        }


@dataclass
class ConversionReport:
    """
    Outcome of a single conversion call.

    A conversion that returns normally is best-effort: ``assigned`` lists the
    fields that were written and ``skipped`` lists everything that was not.
    """

    assigned: List[str] = field(default_factory=list)
    skipped: List[SkippedField] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when nothing was skipped."""
        return not self.skipped

    def skip(self, reason: SkipReason, **details: Any) -> None:
        self.skipped.append(SkippedField(reason=reason, **details))

    def reasons(self) -> List[SkipReason]:
        return [skipped.reason for skipped in self.skipped]
