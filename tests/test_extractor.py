"""
Tests for slot extraction: keyword fallback, generator coercion and merging
"""

from conftest import EXTRACT, NULL_EXTRACTION, FakeCompletion, as_json

from api_recommender.agents.assistant.extractor import (
    coerce_query_info,
    extract_query_info,
    extract_query_info_fallback,
)
from api_recommender.agents.assistant.followup import EVENT_FIELDS_ITEM
from api_recommender.config.constants import ASYNC_ANSWER, UMI_ANSWER
from api_recommender.models.conversation import ASSISTANT, USER, ConversationTurn
from api_recommender.models.query_info import Operation, QueryInfo, TriState
from api_recommender.utils.errors import CompletionError

FAILING = FakeCompletion([(EXTRACT, CompletionError("timeout"))])


class TestFallbackFlags:

    def test_explicit_answers(self):
        q = extract_query_info_fallback("async yes, umi yes, private, field id")
        assert q.is_async is TriState.TRUE
        assert q.is_umi_compliant is TriState.TRUE
        assert q.is_private is TriState.TRUE
        assert q.field_names == {"id"}
        assert q.event_fields == set()

    def test_negations(self):
        q = extract_query_info_fallback("not async, umi: no, public")
        assert q.is_async is TriState.FALSE
        assert q.is_umi_compliant is TriState.FALSE
        assert q.is_private is TriState.FALSE

    def test_assignment_style_negation(self):
        q = extract_query_info_fallback("async=false and no umi")
        assert q.is_async is TriState.FALSE
        assert q.is_umi_compliant is TriState.FALSE

    def test_sync_means_not_async(self):
        assert extract_query_info_fallback("make it synchronous").is_async is TriState.FALSE
        assert extract_query_info_fallback("sync please").is_async is TriState.FALSE

    def test_bare_keyword_defaults_true(self):
        q = extract_query_info_fallback("it should be async and umi compliant")
        assert q.is_async is TriState.TRUE
        assert q.is_umi_compliant is TriState.TRUE

    def test_missing_keywords_stay_unknown(self):
        q = extract_query_info_fallback("hello there")
        assert q == QueryInfo()

    def test_yes_no_matched_to_asked_questions(self):
        context = [
            ConversationTurn(USER, "create a gold bond"),
            ConversationTurn(
                ASSISTANT,
                "1. Is this request async? (yes/no)\n2. Is this UMI compliant? (yes/no)\n3. Is this private or public?",
            ),
        ]
        q = extract_query_info_fallback("yes, no, private", context)
        assert q.is_async is TriState.TRUE
        assert q.is_umi_compliant is TriState.FALSE
        assert q.is_private is TriState.TRUE

    def test_assistant_text_alone_sets_nothing(self):
        context = [ConversationTurn(ASSISTANT, "Is this request async and UMI compliant? Private or public?")]
        q = extract_query_info_fallback("id", context)
        assert q.is_async is TriState.UNKNOWN
        assert q.is_private is TriState.UNKNOWN
        assert q.field_names == {"id"}


class TestFallbackPrivacy:

    def test_last_mentioned_wins(self):
        assert extract_query_info_fallback("public, no wait, private").is_private is TriState.TRUE
        assert extract_query_info_fallback("private or rather public").is_private is TriState.FALSE

    def test_latest_user_turn_wins(self):
        context = [ConversationTurn(USER, "make it private"), ConversationTurn(ASSISTANT, "Noted.")]
        assert extract_query_info_fallback("actually public", context).is_private is TriState.FALSE


class TestFallbackUseCaseAndOperation:

    def test_use_case_needs_cue(self):
        assert extract_query_info_fallback("I want to build an insurance usecase").use_case == "insurance"
        assert extract_query_info_fallback("fixed deposit use case").use_case == "fd"
        assert extract_query_info_fallback("create gold bond").use_case is None

    def test_longest_keyword_wins(self):
        assert extract_query_info_fallback("build a gold bond usecase").use_case == "gold bond"

    def test_operation_aliases(self):
        assert extract_query_info_fallback("issue it").operation is Operation.CREATE
        assert extract_query_info_fallback("manage").operation is Operation.BURN
        assert extract_query_info_fallback("settle").operation is Operation.TRADE

    def test_latest_operation_wins(self):
        context = [ConversationTurn(USER, "create gold bond"), ConversationTurn(ASSISTANT, "Which operation?")]
        assert extract_query_info_fallback("burn", context).operation is Operation.BURN


class TestFallbackFields:

    def test_explanations_are_not_fields(self):
        assert extract_query_info_fallback("explain id").field_names == set()
        assert extract_query_info_fallback("what is toWalletAddress").field_names == set()

    def test_canonical_casing_and_word_bounds(self):
        q = extract_query_info_fallback("use towalletaddress and the paid amount")
        assert q.field_names == {"toWalletAddress"}

    def test_event_cue_splits_fields(self):
        q = extract_query_info_fallback(
            "request payload has id and value, event will have eventType and timestamp"
        )
        assert q.field_names == {"id", "value"}
        assert q.event_fields == {"eventType", "timestamp"}

    def test_answer_to_event_question_is_event_fields(self):
        context = [ConversationTurn(USER, "async yes"), ConversationTurn(ASSISTANT, EVENT_FIELDS_ITEM)]
        q = extract_query_info_fallback("id, timestamp", context)
        assert q.event_fields == {"id", "timestamp"}
        assert q.field_names == set()


class TestCoercion:

    def test_loose_types(self):
        q = coerce_query_info({
            "usecase": "Gold Bond",
            "operation": "issue",
            "is_async": "true",
            "is_umi_compliant": False,
            "is_private": None,
            "field_names": "id, value",
            "event_fields": ["eventType", None, ""],
        })
        assert q.use_case == "gold bond"
        assert q.operation is Operation.CREATE
        assert q.is_async is TriState.TRUE
        assert q.is_umi_compliant is TriState.FALSE
        assert q.is_private is TriState.UNKNOWN
        assert q.field_names == {"id", "value"}
        assert q.event_fields == {"eventType"}

    def test_null_strings(self):
        q = coerce_query_info({"usecase": "null", "operation": 3})
        assert q.use_case is None
        assert q.operation is Operation.UNSET


class TestExtractQueryInfo:

    def test_generator_result_is_used(self):
        completion = FakeCompletion([(EXTRACT, as_json(
            usecase=None, operation="burn", is_async=False, is_umi_compliant=True,
            is_private=True, field_names=["id"], event_fields=[],
        ))])
        q = extract_query_info("burn it", [], None, False, completion)
        assert q.operation is Operation.BURN
        assert q.is_async is TriState.FALSE
        assert q.field_names == {"id"}

    def test_fallback_fills_generator_gaps(self):
        completion = FakeCompletion([(EXTRACT, as_json(
            usecase=None, operation=None, is_async=True, is_umi_compliant=None,
            is_private=None, field_names=[], event_fields=[],
        ))])
        q = extract_query_info("umi yes, private, field id", [], None, False, completion)
        assert q.is_async is TriState.TRUE
        assert q.is_umi_compliant is TriState.TRUE
        assert q.is_private is TriState.TRUE
        assert q.field_names == {"id"}

    def test_generator_failure_uses_fallback(self):
        q = extract_query_info("async no, umi yes, public, value", [], None, False, FAILING)
        assert q.is_async is TriState.FALSE
        assert q.is_umi_compliant is TriState.TRUE
        assert q.is_private is TriState.FALSE
        assert q.field_names == {"value"}

    def test_new_request_drops_history_and_prior(self):
        prior = QueryInfo(is_private=TriState.TRUE, event_fields={"timestamp"}, field_names={"id"})
        history = [ConversationTurn(USER, "it is async and private"), ConversationTurn(ASSISTANT, "ok")]
        completion = FakeCompletion([(EXTRACT, NULL_EXTRACTION)])
        q = extract_query_info("I want to create a new gold bond", history, prior, True, completion)
        assert q.is_private is TriState.UNKNOWN
        assert q.is_async is TriState.UNKNOWN
        assert q.event_fields == set()
        assert q.field_names == set()
        assert "it is async and private" not in completion.calls_with(EXTRACT)[0]

    def test_known_slots_are_not_overwritten(self):
        prior = QueryInfo(is_async=TriState.FALSE)
        completion = FakeCompletion([(EXTRACT, as_json(is_async=True))])
        q = extract_query_info("async", [], prior, False, completion)
        assert q.is_async is TriState.FALSE

    def test_introducing_a_use_case_leaves_operation_unset(self):
        completion = FakeCompletion([(EXTRACT, as_json(usecase="gold bond"))])
        q = extract_query_info("create gold bond", [], QueryInfo(), False, completion)
        assert q.use_case == "gold bond"
        assert q.operation is Operation.UNSET

    def test_operation_answer_after_use_case(self):
        prior = QueryInfo(use_case="gold bond")
        history = [ConversationTurn(USER, "create gold bond"), ConversationTurn(ASSISTANT, "Which operation?")]
        completion = FakeCompletion([(EXTRACT, NULL_EXTRACTION)])
        q = extract_query_info("create", history, prior, False, completion)
        assert q.use_case == "gold bond"
        assert q.operation is Operation.CREATE


class TestFieldQuestionsInHistory:

    HISTORY = [
        ConversationTurn(USER, "create a gold bond token"),
        ConversationTurn(
            ASSISTANT,
            "1. Is this request async? (yes/no)\n2. Is this UMI compliant? (yes/no)\n3. Is this private or public?",
        ),
        ConversationTurn(USER, "what does async mean?"),
        ConversationTurn(ASSISTANT, ASYNC_ANSWER),
        ConversationTurn(USER, "what is umi?"),
        ConversationTurn(ASSISTANT, UMI_ANSWER),
    ]

    def test_questions_do_not_answer_flags(self):
        completion = FakeCompletion([(EXTRACT, NULL_EXTRACTION)])
        q = extract_query_info("private, field id", self.HISTORY, QueryInfo(), False, completion)
        assert q.is_async is TriState.UNKNOWN
        assert q.is_umi_compliant is TriState.UNKNOWN
        assert q.is_private is TriState.TRUE
        assert q.field_names == {"id"}

    def test_later_answer_still_sets_flag(self):
        q = extract_query_info_fallback("async no, umi yes", self.HISTORY)
        assert q.is_async is TriState.FALSE
        assert q.is_umi_compliant is TriState.TRUE

    def test_yes_no_not_mapped_onto_an_answer(self):
        history = [ConversationTurn(USER, "explain async vs sync"), ConversationTurn(ASSISTANT, ASYNC_ANSWER)]
        q = extract_query_info_fallback("yes, no", history)
        assert q.is_async is TriState.UNKNOWN
        assert q.is_umi_compliant is TriState.UNKNOWN

    def test_privacy_question_is_not_an_answer(self):
        history = [ConversationTurn(USER, "explain private vs public"), ConversationTurn(ASSISTANT, "Private data ...")]
        assert extract_query_info_fallback("field id", history).is_private is TriState.UNKNOWN
