"""
Tests for the completeness gate
"""

import itertools

from api_recommender.agents.assistant.gate import MissingSlot, check_completeness, is_complete
from api_recommender.models.query_info import Operation, QueryInfo, TriState


def _expected(q: QueryInfo) -> bool:
    return (
        q.is_async is not TriState.UNKNOWN
        and q.is_umi_compliant is not TriState.UNKNOWN
        and q.is_private is not TriState.UNKNOWN
        and len(q.field_names) > 0
        and (q.use_case is None or q.operation is not Operation.UNSET)
        and (q.is_async is not TriState.TRUE or len(q.event_fields) > 0)
    )


class TestCompletenessGate:

    def test_every_combination(self):
        """The gate agrees with the completeness formula for every slot combination"""
        combos = itertools.product(
            list(TriState),
            list(TriState),
            list(TriState),
            [set(), {"id"}],
            [set(), {"eventType"}],
            [None, "gold bond"],
            list(Operation),
        )
        checked = 0
        for is_async, umi, private, fields, events, use_case, operation in combos:
            q = QueryInfo(
                is_async=is_async,
                is_umi_compliant=umi,
                is_private=private,
                field_names=set(fields),
                event_fields=set(events),
                use_case=use_case,
                operation=operation,
            )
            result = check_completeness(q)
            assert result.is_complete == _expected(q), q
            assert result.is_complete == (not result.missing)
            assert is_complete(q) == result.is_complete
            checked += 1
        assert checked == 3 * 3 * 3 * 2 * 2 * 2 * 4

    def test_missing_slots_are_ordered(self):
        q = QueryInfo(use_case="fd", is_async=TriState.TRUE)
        assert check_completeness(q).missing == (
            MissingSlot.OPERATION,
            MissingSlot.UMI,
            MissingSlot.PRIVATE,
            MissingSlot.FIELDS,
            MissingSlot.EVENT_FIELDS,
        )

    def test_async_requires_event_fields(self):
        q = QueryInfo(
            is_async=TriState.TRUE,
            is_umi_compliant=TriState.TRUE,
            is_private=TriState.TRUE,
            field_names={"id"},
        )
        assert check_completeness(q).missing == (MissingSlot.EVENT_FIELDS,)

    def test_gate_does_not_modify_input(self):
        q = QueryInfo(field_names={"id"})
        before = q.to_dict()
        check_completeness(q)
        assert q.to_dict() == before
