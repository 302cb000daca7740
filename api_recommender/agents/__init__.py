"""
Agents
"""

from api_recommender.agents.assistant import AssistantAgent

__all__ = ["AssistantAgent"]
