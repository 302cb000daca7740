"""
Chat and session models for the HTTP API
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChatRequest(BaseModel):
    """
    Chat request

    A missing or blank sessionId starts a new session.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"sessionId": "3f1c...", "message": "I want to create a gold bond"},
            ]
        },
    )

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: str = Field(..., description="User message")

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be empty")
        return value


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    message: str


class SessionInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    last_message_at: Optional[str] = Field(default=None, alias="lastMessageAt")
    last_message_preview: Optional[str] = Field(default=None, alias="lastMessagePreview")
    message_count: int = Field(default=0, alias="messageCount")


class SessionsResponse(BaseModel):
    sessions: List[SessionInfo]


class StoredMessage(BaseModel):
    role: str
    content: str
    created: Optional[str] = None


class MessagesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    messages: List[StoredMessage]


class HealthResponse(BaseModel):
    """
    Health check response

    Attributes:
        status: Service health status
        service: Service name
        version: API version
    """
    status: str = Field(..., description="Health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
