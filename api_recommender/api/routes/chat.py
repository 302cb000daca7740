"""
Chat endpoint
"""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from api_recommender.agents.assistant import AssistantAgent
from api_recommender.api.dependencies import get_agent
from api_recommender.api.schemas import ChatRequest, ChatResponse
from api_recommender.utils.errors import AgentError, ValidationError

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse, response_model_by_alias=True)
async def chat(body: ChatRequest, agent: AssistantAgent = Depends(get_agent)):
    """
    Send one message to the assistant.

    Returns the assistant reply and the session id to use for the next turn.
    """
    try:
        response, session_id = await agent.handle_turn(body.session_id, body.message)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AgentError as e:
        logger.error(f"Chat turn failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error in chat turn: {e}")
        raise HTTPException(status_code=500, detail=f"Internal error: {e}")

    return ChatResponse(session_id=session_id, message=response)
