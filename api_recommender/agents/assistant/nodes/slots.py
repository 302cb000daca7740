"""
Slot filling nodes - new request detection, extraction and the completeness gate
"""

from loguru import logger

from api_recommender.agents.assistant.context import AssistantContext
from api_recommender.agents.assistant.extractor import extract_query_info
from api_recommender.agents.assistant.gate import check_completeness
from api_recommender.agents.assistant.new_request import is_new_request
from api_recommender.agents.assistant.state import AssistantState
from api_recommender.config.settings import settings
from api_recommender.models.conversation import last_turns


def detect_new_request_node(state: AssistantState, ctx: AssistantContext) -> AssistantState:
    state = dict(state)
    state["is_new_request"] = is_new_request(state["utterance"], state["history"])
    if state["is_new_request"]:
        logger.info("New creation request detected; carried slots are dropped")
    return state


def extract_node(state: AssistantState, ctx: AssistantContext) -> AssistantState:
    """Extract this turn's slots and merge them onto the carried ones."""
    state = dict(state)
    window_size = (
        settings.new_request_window_turns
        if state["is_new_request"]
        else settings.continuation_window_turns
    )
    state["query_info"] = extract_query_info(
        state["utterance"],
        last_turns(state["history"], window_size),
        state["prior_query_info"],
        state["is_new_request"],
        ctx.completion,
    )
    return state


def gate_node(state: AssistantState, ctx: AssistantContext) -> AssistantState:
    state = dict(state)
    result = check_completeness(state["query_info"])
    state["missing"] = [slot.value for slot in result.missing]
    logger.info(f"Completeness gate: complete={result.is_complete}, missing={state['missing']}")
    return state
