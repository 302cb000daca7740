"""
Tests for the QueryInfo slot set
"""

from api_recommender.models.query_info import Operation, QueryInfo, TriState


class TestTriState:

    def test_from_bool(self):
        assert TriState.from_bool(None) is TriState.UNKNOWN
        assert TriState.from_bool(True) is TriState.TRUE
        assert TriState.from_bool(False) is TriState.FALSE

    def test_as_bool(self):
        assert TriState.UNKNOWN.as_bool() is None
        assert TriState.TRUE.as_bool() is True
        assert not TriState.UNKNOWN.is_known


class TestOperation:

    def test_aliases(self):
        assert Operation.parse("issue") is Operation.CREATE
        assert Operation.parse("Manage") is Operation.BURN
        assert Operation.parse("settle") is Operation.TRADE
        assert Operation.parse(None) is Operation.UNSET
        assert Operation.parse("fly") is Operation.UNSET


class TestQueryInfo:

    def test_field_sets_are_disjoint_on_construction(self):
        q = QueryInfo(field_names={"id", "timestamp"}, event_fields={"timestamp"})
        assert q.field_names == {"id"}
        assert q.event_fields == {"timestamp"}

    def test_blank_use_case_is_unset(self):
        assert QueryInfo(use_case="  ").use_case is None

    def test_merge_keeps_known_tri_states(self):
        prior = QueryInfo(is_async=TriState.FALSE)
        update = QueryInfo(is_async=TriState.TRUE, is_private=TriState.TRUE)
        merged = prior.merge(update)
        assert merged.is_async is TriState.FALSE
        assert merged.is_private is TriState.TRUE

    def test_merge_does_not_forget_with_unknown(self):
        prior = QueryInfo(is_umi_compliant=TriState.TRUE, operation=Operation.BURN, use_case="fd")
        merged = prior.merge(QueryInfo())
        assert merged == prior

    def test_merge_unions_fields_and_moves_reassigned_names(self):
        prior = QueryInfo(field_names={"id", "type"}, event_fields={"timestamp"})
        update = QueryInfo(field_names={"value"}, event_fields={"type"})
        merged = prior.merge(update)
        assert merged.field_names == {"id", "value"}
        assert merged.event_fields == {"timestamp", "type"}
        assert not merged.field_names & merged.event_fields

    def test_fill_gaps_only_fills_unknowns(self):
        primary = QueryInfo(is_async=TriState.TRUE, field_names={"id"})
        fallback = QueryInfo(
            is_async=TriState.FALSE,
            is_private=TriState.FALSE,
            field_names={"value"},
            operation=Operation.CREATE,
        )
        filled = primary.fill_gaps(fallback)
        assert filled.is_async is TriState.TRUE
        assert filled.is_private is TriState.FALSE
        assert filled.field_names == {"id"}
        assert filled.operation is Operation.CREATE

    def test_fill_gaps_can_skip_operation(self):
        filled = QueryInfo().fill_gaps(QueryInfo(operation=Operation.CREATE), include_operation=False)
        assert filled.operation is Operation.UNSET

    def test_dict_round_trip(self):
        q = QueryInfo(
            is_async=TriState.TRUE,
            is_umi_compliant=TriState.FALSE,
            field_names={"id"},
            event_fields={"eventType"},
            operation=Operation.TRADE,
            use_case="gold bond",
        )
        data = q.to_dict()
        assert data["is_async"] is True
        assert data["is_private"] is None
        assert data["operation"] == "trade"
        assert QueryInfo.from_dict(data) == q

    def test_from_empty_dict(self):
        assert QueryInfo.from_dict(None).is_empty()
