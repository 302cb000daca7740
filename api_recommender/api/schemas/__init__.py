"""
API schemas for request/response models
"""

from api_recommender.api.schemas.chat import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    MessagesResponse,
    SessionInfo,
    SessionsResponse,
    StoredMessage,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
    "MessagesResponse",
    "SessionInfo",
    "SessionsResponse",
    "StoredMessage",
]
