"""
Direct response nodes - off-topic redirect and field questions
"""

from loguru import logger

from api_recommender.agents.assistant.answer import answer_field_question
from api_recommender.agents.assistant.context import AssistantContext
from api_recommender.agents.assistant.state import AssistantState
from api_recommender.config.constants import REDIRECT_MESSAGE


def redirect_node(state: AssistantState, ctx: AssistantContext) -> AssistantState:
    state = dict(state)
    state["response"] = REDIRECT_MESSAGE
    state["outcome"] = "redirect"
    return state


def answer_node(state: AssistantState, ctx: AssistantContext) -> AssistantState:
    """Answer a question about a field; carried slots are left untouched."""
    state = dict(state)
    logger.info("Answering field question")
    state["response"] = answer_field_question(state["utterance"], ctx.completion)
    state["outcome"] = "answer"
    return state
