"""
Session history endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from api_recommender.agents.assistant import AssistantAgent
from api_recommender.api.dependencies import get_agent
from api_recommender.api.schemas import MessagesResponse, SessionInfo, SessionsResponse, StoredMessage
from api_recommender.utils.errors import ValidationError

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=SessionsResponse, response_model_by_alias=True)
async def list_sessions(
    limit: Optional[int] = Query(default=None, ge=1),
    agent: AssistantAgent = Depends(get_agent),
):
    """Sessions ordered by most recent activity."""
    try:
        sessions = await agent.list_sessions(limit)
    except Exception as e:
        logger.error(f"Failed to list sessions: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return SessionsResponse(sessions=[
        SessionInfo(
            id=s.id,
            last_message_at=s.last_message_at,
            last_message_preview=s.last_message_preview,
            message_count=s.message_count,
        )
        for s in sessions
    ])


@router.get("/{session_id}/messages", response_model=MessagesResponse, response_model_by_alias=True)
async def get_session_messages(
    session_id: str,
    limit: Optional[int] = Query(default=None, ge=1),
    agent: AssistantAgent = Depends(get_agent),
):
    try:
        turns = await agent.get_session_messages(session_id, limit)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to load messages for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return MessagesResponse(
        session_id=session_id,
        messages=[StoredMessage(role=t.role, content=t.text, created=t.timestamp) for t in turns],
    )
