"""
Request dependencies
"""

from fastapi import HTTPException, Request

from api_recommender.agents.assistant import AssistantAgent


def get_agent(request: Request) -> AssistantAgent:
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(status_code=503, detail="Assistant is not ready")
    return agent
