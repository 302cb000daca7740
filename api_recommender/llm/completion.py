"""
Completion port - the text-in/text-out boundary to the generator.

Pipeline steps only depend on ``CompletionPort``; ``LLMCompletion`` adapts a
LangChain chat model to it. Any failure of the underlying model is raised as
``CompletionError`` so callers can decide between fallback and surfacing.
"""

from typing import Callable, Dict, Protocol

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from loguru import logger

from api_recommender.llm.client import create_llm
from api_recommender.llm.response_utils import extract_text_from_response
from api_recommender.utils.errors import CompletionError


class CompletionPort(Protocol):
    """Opaque text generator. May fail; output format is not guaranteed."""

    def complete(self, prompt: str, temperature: float) -> str:
        ...


class LLMCompletion:
    """CompletionPort backed by LangChain chat models, one per temperature."""

    def __init__(self, llm_factory: Callable[..., BaseChatModel] = create_llm):
        self._llm_factory = llm_factory
        self._models: Dict[float, BaseChatModel] = {}

    def _model_for(self, temperature: float) -> BaseChatModel:
        if temperature not in self._models:
            self._models[temperature] = self._llm_factory(temperature=temperature)
        return self._models[temperature]

    def complete(self, prompt: str, temperature: float) -> str:
        try:
            response = self._model_for(temperature).invoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.warning(f"Completion call failed: {e}")
            raise CompletionError(str(e)) from e
        return extract_text_from_response(response)
