from pydantic import Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.models.chat import ChatTypeEnum, MessageRoleEnum
from app.schemas.base import APIModel


class ChatSessionCreate(APIModel):
    title: Optional[str] = Field(None, max_length=200)
    type: ChatTypeEnum = ChatTypeEnum.GENERAL
    metadata: Optional[Dict[str, Any]] = None


class ChatSession(APIModel):
    id: str
    title: str
    type: ChatTypeEnum
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="session_metadata")
    message_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ChatMessageCreate(APIModel):
    content: str = Field(..., min_length=1, max_length=4000)


class ChatMessage(APIModel):
    id: str
    session_id: str
    role: MessageRoleEnum
    content: str
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="message_metadata")
    created_at: datetime


class ChatSessionDetail(ChatSession):
    messages: List[ChatMessage] = Field(default_factory=list)


class ChatSessionInfo(APIModel):
    id: str
    type: ChatTypeEnum
    title: str


class ChatExchange(APIModel):
    """Result of sending a message: the stored user turn and the AI reply."""
    user_message: ChatMessage
    ai_message: ChatMessage
    session: ChatSessionInfo


class FinancialInsights(APIModel):
    summary: str
    insights: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    model: Optional[str] = None
    generated_at: datetime
