"""
Assistant workflow state
"""

from typing import List, Optional, TypedDict

from api_recommender.models.catalog import Recommendation
from api_recommender.models.conversation import ConversationTurn
from api_recommender.models.query_info import QueryInfo


class AssistantState(TypedDict):
    """State for one turn of the assistant workflow"""
    session_id: str
    utterance: str
    history: List[ConversationTurn]  # Recent turns, oldest first
    prior_query_info: QueryInfo  # Slots carried from the previous turn
    is_creation: bool
    is_relevant: bool
    is_new_request: bool
    query_info: Optional[QueryInfo]
    missing: List[str]
    recommendation: Optional[Recommendation]
    response: str
    outcome: str  # redirect | answer | followup | recommendation
