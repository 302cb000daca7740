"""
Intent classification node
"""

from api_recommender.agents.assistant.classifier import classify_intent
from api_recommender.agents.assistant.context import AssistantContext
from api_recommender.agents.assistant.state import AssistantState


def classify_node(state: AssistantState, ctx: AssistantContext) -> AssistantState:
    """Decide between redirect, field question and creation flow."""
    state = dict(state)
    result = classify_intent(state["utterance"], state["history"], ctx.completion)
    state["is_creation"] = result.is_creation
    state["is_relevant"] = result.is_relevant
    return state
