"""
Tests for API selection, field selection and payload synthesis
"""

import json

import pytest
from conftest import EVENT_PAYLOAD, REQUEST_PAYLOAD, SELECT_API, SELECT_FIELDS, FakeCompletion, as_json

from api_recommender.agents.assistant.recommender import (
    describe_request,
    recommend,
    select_api,
    select_fields,
    synthesize_event_payload,
    synthesize_request_payload,
    wants_xml,
)
from api_recommender.models.query_info import Operation, QueryInfo, TriState
from api_recommender.utils.errors import (
    ApiSelectionError,
    CompletionError,
    IndexOutOfRangeError,
    PayloadSynthesisError,
)

SYNC_REQUEST = QueryInfo(
    is_async=TriState.FALSE,
    is_umi_compliant=TriState.TRUE,
    is_private=TriState.TRUE,
    field_names={"id", "value"},
)

ASYNC_REQUEST = QueryInfo(
    is_async=TriState.TRUE,
    is_umi_compliant=TriState.TRUE,
    is_private=TriState.FALSE,
    field_names={"id"},
    event_fields={"eventType", "timestamp"},
)

REQUEST_JSON = '{"context": {"isAsync": false, "isUMICompliant": true}, "payload": {"tokenizedAsset": [{"id": "A1"}]}}'
EVENT_JSON = '{"payload": {"event": [{"eventType": "ISSUED", "timestamp": "2024-01-01T00:00:00Z"}]}}'


class TestSelectApi:

    def test_selects_index(self, catalog):
        completion = FakeCompletion([(SELECT_API, 'Sure! {"api_index": 1}')])
        index, api = select_api(catalog, "burn my bond", SYNC_REQUEST, completion)
        assert index == 1
        assert api.name == "Req Manage"

    def test_prompt_lists_catalog_and_hints(self, catalog):
        completion = FakeCompletion([(SELECT_API, as_json(api_index=0))])
        q = QueryInfo(use_case="gold bond", operation=Operation.CREATE)
        select_api(catalog, "create gold bond", q, completion)
        prompt = completion.calls_with(SELECT_API)[0]
        assert "[2] POST /v1/req/settle" in prompt
        assert "API type: req issue" in prompt

    def test_empty_catalog(self):
        with pytest.raises(ApiSelectionError):
            select_api([], "create", SYNC_REQUEST, FakeCompletion())

    def test_call_failure(self, catalog):
        with pytest.raises(ApiSelectionError):
            select_api(catalog, "create", SYNC_REQUEST, FakeCompletion())

    def test_unparseable_reply(self, catalog):
        completion = FakeCompletion([(SELECT_API, "the first one")])
        with pytest.raises(ApiSelectionError):
            select_api(catalog, "create", SYNC_REQUEST, completion)

    @pytest.mark.parametrize("index", [3, -1, 999])
    def test_out_of_range(self, catalog, index):
        completion = FakeCompletion([(SELECT_API, as_json(api_index=index))])
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            select_api(catalog, "create", SYNC_REQUEST, completion)
        assert exc_info.value.index == index
        assert exc_info.value.catalog_size == 3


class TestSelectFields:

    def test_out_of_range_indices_dropped(self, catalog):
        completion = FakeCompletion([(SELECT_FIELDS, as_json(field_index=[0, 2, 7, "1"]))])
        fields = select_fields(catalog[0], "create", SYNC_REQUEST, completion)
        assert [f.name for f in fields] == ["id", "toWalletAddress", "value"]

    def test_failure_matches_named_fields(self, catalog):
        fields = select_fields(catalog[0], "create", SYNC_REQUEST, FakeCompletion())
        assert [f.name for f in fields] == ["id", "value"]

    def test_api_without_fields(self, catalog):
        completion = FakeCompletion()
        assert select_fields(catalog[2], "trade", SYNC_REQUEST, completion) == []
        assert completion.prompts == []


class TestRequestPayload:

    def test_json_is_pretty_printed(self, catalog):
        completion = FakeCompletion([(REQUEST_PAYLOAD, f"```json\n{REQUEST_JSON}\n```")])
        payload = synthesize_request_payload(catalog[0], "create", SYNC_REQUEST, completion)
        assert payload == json.dumps(json.loads(REQUEST_JSON), indent=2)
        prompt = completion.calls_with(REQUEST_PAYLOAD)[0]
        assert "Output format: JSON" in prompt
        assert "set context.isAsync to false" in prompt
        assert "include both 'source' and 'destination'" in prompt

    def test_xml_when_user_asks(self, catalog):
        xml = "<request><payload/></request>"
        completion = FakeCompletion([(REQUEST_PAYLOAD, f"```xml\n{xml}\n```")])
        payload = synthesize_request_payload(
            catalog[0], "create", SYNC_REQUEST, completion, user_texts=["give me the XML please"]
        )
        assert payload == xml
        assert "Output format: XML" in completion.calls_with(REQUEST_PAYLOAD)[0]

    def test_no_fields_no_payload(self, catalog):
        completion = FakeCompletion()
        assert synthesize_request_payload(catalog[0], "create", QueryInfo(), completion) == ""
        assert completion.prompts == []

    def test_event_fields_kept_out_of_request(self, catalog):
        completion = FakeCompletion([(REQUEST_PAYLOAD, "{}")])
        synthesize_request_payload(catalog[0], "create", ASYNC_REQUEST, completion)
        prompt = completion.calls_with(REQUEST_PAYLOAD)[0]
        assert "EVENT payload only: eventType, timestamp" in prompt
        assert "Public data" in prompt

    def test_invalid_json_returned_unchanged(self, catalog):
        completion = FakeCompletion([(REQUEST_PAYLOAD, "{not json")])
        assert synthesize_request_payload(catalog[0], "create", SYNC_REQUEST, completion) == "{not json"

    def test_call_failure(self, catalog):
        completion = FakeCompletion([(REQUEST_PAYLOAD, CompletionError("boom"))])
        with pytest.raises(PayloadSynthesisError):
            synthesize_request_payload(catalog[0], "create", SYNC_REQUEST, completion)

    def test_wants_xml_word_bounded(self):
        assert wants_xml(["send it as xml"])
        assert not wants_xml(["use xmlns prefix"])


class TestEventPayload:

    def test_only_for_async_with_event_fields(self):
        completion = FakeCompletion([(EVENT_PAYLOAD, EVENT_JSON)])
        assert synthesize_event_payload(SYNC_REQUEST, completion) == ""
        assert completion.prompts == []

    def test_generated(self):
        completion = FakeCompletion([(EVENT_PAYLOAD, EVENT_JSON)])
        payload = synthesize_event_payload(ASYNC_REQUEST, completion)
        assert json.loads(payload) == json.loads(EVENT_JSON)
        assert "eventType, timestamp" in completion.calls_with(EVENT_PAYLOAD)[0]

    def test_failure_is_empty(self):
        completion = FakeCompletion([(EVENT_PAYLOAD, CompletionError("boom"))])
        assert synthesize_event_payload(ASYNC_REQUEST, completion) == ""


class TestRecommend:

    def test_full_recommendation(self, catalog):
        completion = FakeCompletion([
            (SELECT_API, as_json(api_index=0)),
            (SELECT_FIELDS, as_json(field_index=[0])),
            (REQUEST_PAYLOAD, REQUEST_JSON),
            (EVENT_PAYLOAD, EVENT_JSON),
        ])
        recommendation = recommend(catalog, "create a gold bond", ASYNC_REQUEST, completion)
        assert recommendation.api.path == "/v1/req/issue"
        assert [f.name for f in recommendation.fields] == ["id"]

        text = recommendation.render()
        assert text.startswith("Recommended API:")
        assert " Path: /v1/req/issue" in text
        assert " - id (string): Asset identifier" in text
        assert "Sample payload:" in text
        assert text.index("Sample payload:") < text.index("Event payload:")

    def test_event_failure_still_recommends(self, catalog):
        completion = FakeCompletion([
            (SELECT_API, as_json(api_index=2)),
            (REQUEST_PAYLOAD, REQUEST_JSON),
            (EVENT_PAYLOAD, CompletionError("boom")),
        ])
        recommendation = recommend(catalog, "trade", ASYNC_REQUEST, completion)
        assert recommendation.event_payload is None
        text = recommendation.render()
        assert "Suggested fields: not required" in text
        assert "Event payload:" not in text

    def test_describe_request(self):
        q = QueryInfo(use_case="fd", operation=Operation.TRADE)
        assert describe_request("settle it", q) == (
            "settle it (usecase: fd) (operation: trade, API type: req settle)"
        )
