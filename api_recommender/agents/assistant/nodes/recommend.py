"""
Recommendation node
"""

from api_recommender.agents.assistant.context import AssistantContext
from api_recommender.agents.assistant.recommender import recommend
from api_recommender.agents.assistant.state import AssistantState
from api_recommender.config.settings import settings
from api_recommender.models.conversation import format_window, last_turns, user_texts


def conversation_aware_request(state: AssistantState) -> str:
    """Latest utterance prefixed with the conversation that led to it."""
    latest = state["utterance"].strip()
    window = [] if state["is_new_request"] else last_turns(state["history"], settings.continuation_window_turns)
    if not window:
        return latest
    return f"Conversation so far:\n{format_window(window)}\n\nLatest user request: {latest}"


def recommend_node(state: AssistantState, ctx: AssistantContext) -> AssistantState:
    """Select an API and synthesize payloads; selection and request payload failures propagate."""
    state = dict(state)
    window = [] if state["is_new_request"] else state["history"]
    recommendation = recommend(
        ctx.catalog,
        conversation_aware_request(state),
        state["query_info"],
        ctx.completion,
        user_texts=user_texts(window) + [state["utterance"]],
    )
    state["recommendation"] = recommendation
    state["response"] = recommendation.render()
    state["outcome"] = "recommendation"
    return state
