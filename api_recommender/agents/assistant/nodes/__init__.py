"""
Assistant workflow nodes
"""

from api_recommender.agents.assistant.nodes.classify import classify_node
from api_recommender.agents.assistant.nodes.answer import redirect_node, answer_node
from api_recommender.agents.assistant.nodes.slots import detect_new_request_node, extract_node, gate_node
from api_recommender.agents.assistant.nodes.followup import followup_node
from api_recommender.agents.assistant.nodes.recommend import recommend_node

__all__ = [
    "classify_node",
    "redirect_node",
    "answer_node",
    "detect_new_request_node",
    "extract_node",
    "gate_node",
    "followup_node",
    "recommend_node",
]
