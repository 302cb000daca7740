"""
Completeness gate - pure predicate over the slot set
"""

import enum
from dataclasses import dataclass
from typing import Tuple

from api_recommender.models.query_info import Operation, QueryInfo, TriState


class MissingSlot(str, enum.Enum):
    """Unmet gate conditions, in the order they are asked for."""
    OPERATION = "operation"
    ASYNC = "async"
    UMI = "umi"
    PRIVATE = "private"
    FIELDS = "fields"
    EVENT_FIELDS = "event_fields"


@dataclass(frozen=True)
class CompletenessResult:
    is_complete: bool
    missing: Tuple[MissingSlot, ...] = ()


def check_completeness(query_info: QueryInfo) -> CompletenessResult:
    """Collect every unmet condition; complete when there are none."""
    missing = []
    if query_info.has_use_case and query_info.operation is Operation.UNSET:
        missing.append(MissingSlot.OPERATION)
    if not query_info.is_async.is_known:
        missing.append(MissingSlot.ASYNC)
    if not query_info.is_umi_compliant.is_known:
        missing.append(MissingSlot.UMI)
    if not query_info.is_private.is_known:
        missing.append(MissingSlot.PRIVATE)
    if not query_info.field_names:
        missing.append(MissingSlot.FIELDS)
    if query_info.is_async is TriState.TRUE and not query_info.event_fields:
        missing.append(MissingSlot.EVENT_FIELDS)
    return CompletenessResult(is_complete=not missing, missing=tuple(missing))


def is_complete(query_info: QueryInfo) -> bool:
    return check_completeness(query_info).is_complete
