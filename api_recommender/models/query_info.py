"""
Slot set carried across the turns of one creation request.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Set


class TriState(str, enum.Enum):
    """A not-yet-answered boolean."""
    UNKNOWN = "unknown"
    TRUE = "true"
    FALSE = "false"

    @classmethod
    def from_bool(cls, value: Optional[bool]) -> "TriState":
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    @property
    def is_known(self) -> bool:
        return self is not TriState.UNKNOWN

    def as_bool(self) -> Optional[bool]:
        if self is TriState.UNKNOWN:
            return None
        return self is TriState.TRUE


class Operation(str, enum.Enum):
    """Operation requested for a usecase."""
    UNSET = "unset"
    CREATE = "create"
    BURN = "burn"
    TRADE = "trade"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Operation":
        """Map generator/user wording onto an operation."""
        if not value:
            return cls.UNSET
        normalized = str(value).strip().lower()
        aliases = {
            "create": cls.CREATE, "issue": cls.CREATE,
            "burn": cls.BURN, "manage": cls.BURN,
            "trade": cls.TRADE, "settle": cls.TRADE,
        }
        return aliases.get(normalized, cls.UNSET)


def _clean_names(names: Optional[Iterable[Any]]) -> Set[str]:
    if not names:
        return set()
    return {str(name).strip() for name in names if name is not None and str(name).strip()}


@dataclass
class QueryInfo:
    """Required information for an API recommendation.

    ``field_names`` and ``event_fields`` are kept disjoint.
    """
    is_async: TriState = TriState.UNKNOWN
    is_umi_compliant: TriState = TriState.UNKNOWN
    is_private: TriState = TriState.UNKNOWN
    field_names: Set[str] = field(default_factory=set)
    event_fields: Set[str] = field(default_factory=set)
    operation: Operation = Operation.UNSET
    use_case: Optional[str] = None

    def __post_init__(self):
        self.field_names = _clean_names(self.field_names)
        self.event_fields = _clean_names(self.event_fields)
        # A name named for the event payload leaves the request payload
        self.field_names -= self.event_fields
        if self.use_case is not None and not self.use_case.strip():
            self.use_case = None

    @property
    def has_use_case(self) -> bool:
        return self.use_case is not None

    def is_empty(self) -> bool:
        return self == QueryInfo()

    def merge(self, update: "QueryInfo") -> "QueryInfo":
        """Overlay the slots ``update`` resolves onto this (prior) slot set.

        Tri-states only move from UNKNOWN to a value, usecase and operation are
        only set when unset, field sets are unioned.
        """
        field_names = (self.field_names - update.event_fields) | update.field_names
        event_fields = (self.event_fields - update.field_names) | update.event_fields
        return QueryInfo(
            is_async=self.is_async if self.is_async.is_known else update.is_async,
            is_umi_compliant=self.is_umi_compliant if self.is_umi_compliant.is_known else update.is_umi_compliant,
            is_private=self.is_private if self.is_private.is_known else update.is_private,
            field_names=field_names,
            event_fields=event_fields,
            operation=self.operation if self.operation is not Operation.UNSET else update.operation,
            use_case=self.use_case if self.use_case is not None else update.use_case,
        )

    def fill_gaps(self, fallback: "QueryInfo", include_operation: bool = True) -> "QueryInfo":
        """Use ``fallback`` only for scalar slots this set leaves unknown/unset."""
        operation = self.operation
        if operation is Operation.UNSET and include_operation:
            operation = fallback.operation
        return QueryInfo(
            is_async=self.is_async if self.is_async.is_known else fallback.is_async,
            is_umi_compliant=self.is_umi_compliant if self.is_umi_compliant.is_known else fallback.is_umi_compliant,
            is_private=self.is_private if self.is_private.is_known else fallback.is_private,
            field_names=self.field_names or fallback.field_names,
            event_fields=self.event_fields or fallback.event_fields,
            operation=operation,
            use_case=self.use_case if self.use_case is not None else fallback.use_case,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "is_async": self.is_async.as_bool(),
            "is_umi_compliant": self.is_umi_compliant.as_bool(),
            "is_private": self.is_private.as_bool(),
            "field_names": sorted(self.field_names),
            "event_fields": sorted(self.event_fields),
            "operation": None if self.operation is Operation.UNSET else self.operation.value,
            "use_case": self.use_case,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "QueryInfo":
        """Create QueryInfo from dictionary"""
        if not data:
            return cls()
        return cls(
            is_async=TriState.from_bool(data.get("is_async")),
            is_umi_compliant=TriState.from_bool(data.get("is_umi_compliant")),
            is_private=TriState.from_bool(data.get("is_private")),
            field_names=set(data.get("field_names") or []),
            event_fields=set(data.get("event_fields") or []),
            operation=Operation.parse(data.get("operation")),
            use_case=data.get("use_case"),
        )
