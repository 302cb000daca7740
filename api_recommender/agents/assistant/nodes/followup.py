"""
Follow-up question node
"""

from api_recommender.agents.assistant.context import AssistantContext
from api_recommender.agents.assistant.followup import compose_followup
from api_recommender.agents.assistant.state import AssistantState


def followup_node(state: AssistantState, ctx: AssistantContext) -> AssistantState:
    state = dict(state)
    state["response"] = compose_followup(state["query_info"], ctx.completion)
    state["outcome"] = "followup"
    return state
