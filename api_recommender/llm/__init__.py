"""
LLM layer - Client, completion port and response utilities
"""

from api_recommender.llm.client import create_llm, describe_provider
from api_recommender.llm.completion import CompletionPort, LLMCompletion
from api_recommender.llm.json_utils import parse_json_object, extract_json_block
from api_recommender.llm.response_utils import extract_text_from_response

__all__ = [
    "create_llm",
    "describe_provider",
    "CompletionPort",
    "LLMCompletion",
    "parse_json_object",
    "extract_json_block",
    "extract_text_from_response",
]
