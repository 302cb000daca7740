"""
Tests for the LangChain completion adapter and response text extraction
"""

import pytest
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import AIMessage

from api_recommender.llm.completion import LLMCompletion
from api_recommender.llm.response_utils import extract_text_from_response
from api_recommender.utils.errors import CompletionError


class TestLLMCompletion:

    def test_returns_model_text(self):
        completion = LLMCompletion(lambda temperature: FakeListChatModel(responses=['{"api_index": 0}']))
        assert completion.complete("pick an API", 0.0) == '{"api_index": 0}'

    def test_one_model_per_temperature(self):
        created = []

        def factory(temperature):
            created.append(temperature)
            return FakeListChatModel(responses=["ok"])

        completion = LLMCompletion(factory)
        completion.complete("a", 0.0)
        completion.complete("b", 0.0)
        completion.complete("c", 0.3)
        assert created == [0.0, 0.3]

    def test_model_failure_is_completion_error(self):
        def factory(temperature):
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")

        with pytest.raises(CompletionError):
            LLMCompletion(factory).complete("hello", 0.0)


class TestExtractText:

    def test_plain_message(self):
        assert extract_text_from_response(AIMessage(content="hello")) == "hello"

    def test_reasoning_blocks_skipped(self):
        content = [
            {"type": "reasoning", "text": "thinking..."},
            {"type": "text", "text": "answer"},
        ]
        assert extract_text_from_response(AIMessage(content=content)) == "answer"

    def test_empty(self):
        assert extract_text_from_response(AIMessage(content="")) == ""
        assert extract_text_from_response(None) == ""
