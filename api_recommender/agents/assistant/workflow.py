"""
Assistant workflow - graph construction
"""

from langgraph.graph import StateGraph, END

from api_recommender.agents.assistant.context import AssistantContext
from api_recommender.agents.assistant.nodes import (
    classify_node,
    redirect_node,
    answer_node,
    detect_new_request_node,
    extract_node,
    gate_node,
    followup_node,
    recommend_node,
)
from api_recommender.agents.assistant.state import AssistantState


def _route_after_classification(state: AssistantState) -> str:
    if not state.get("is_relevant", True):
        return "redirect"
    if not state.get("is_creation", False):
        return "answer"
    return "detect_new_request"


def _route_after_gate(state: AssistantState) -> str:
    return "followup" if state.get("missing") else "recommend"


def build_assistant_workflow(ctx: AssistantContext):
    """
    Build the per-turn workflow graph with context bound to nodes.

    classify -> redirect | answer | detect_new_request -> extract -> gate -> followup | recommend
    """
    g = StateGraph(AssistantState)

    g.add_node("classify", lambda s: classify_node(s, ctx))
    g.add_node("redirect", lambda s: redirect_node(s, ctx))
    g.add_node("answer", lambda s: answer_node(s, ctx))
    g.add_node("detect_new_request", lambda s: detect_new_request_node(s, ctx))
    g.add_node("extract", lambda s: extract_node(s, ctx))
    g.add_node("gate", lambda s: gate_node(s, ctx))
    g.add_node("followup", lambda s: followup_node(s, ctx))
    g.add_node("recommend", lambda s: recommend_node(s, ctx))

    g.set_entry_point("classify")
    g.add_conditional_edges(
        "classify",
        _route_after_classification,
        {
            "redirect": "redirect",
            "answer": "answer",
            "detect_new_request": "detect_new_request",
        },
    )
    g.add_edge("detect_new_request", "extract")
    g.add_edge("extract", "gate")
    g.add_conditional_edges(
        "gate",
        _route_after_gate,
        {
            "followup": "followup",
            "recommend": "recommend",
        },
    )

    g.add_edge("redirect", END)
    g.add_edge("answer", END)
    g.add_edge("followup", END)
    g.add_edge("recommend", END)
    return g.compile()
