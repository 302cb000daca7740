"""
API recommender assistant - multi-turn slot filling workflow
"""

from api_recommender.agents.assistant.agent import AssistantAgent

__all__ = ["AssistantAgent"]
