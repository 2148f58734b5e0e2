from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.deps import get_current_active_user
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.chat import (
    ChatExchange,
    ChatMessage,
    ChatMessageCreate,
    ChatSession,
    ChatSessionCreate,
    ChatSessionDetail,
)
from app.services.ai_chat_service import AIChatService
from app.services.ai_service import AIService, get_ai_service
from app.services.chat_service import ChatService

router = APIRouter()


@router.get("/sessions", response_model=List[ChatSession])
async def list_sessions(
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return ChatService(db).list_sessions(current_user.id, limit=limit)


@router.post("/sessions", response_model=ChatSession, status_code=status.HTTP_201_CREATED)
async def create_session(
    session_in: ChatSessionCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return ChatService(db).create_session(
        current_user.id,
        title=session_in.title,
        chat_type=session_in.type,
        metadata=session_in.metadata,
    )


@router.get("/sessions/{session_id}", response_model=ChatSessionDetail)
async def get_session(
    session_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Session with its full message history"""
    return ChatService(db).get_session(session_id, current_user.id)


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def delete_session(
    session_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    ChatService(db).delete_session(session_id, current_user.id)
    return {"message": "Chat session deleted"}


@router.get("/sessions/{session_id}/messages", response_model=List[ChatMessage])
async def list_messages(
    session_id: str,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return ChatService(db).get_messages(session_id, current_user.id, limit=limit, offset=offset)


@router.post("/sessions/{session_id}/messages", response_model=ChatExchange, status_code=status.HTTP_201_CREATED)
async def send_message(
    session_id: str,
    message_in: ChatMessageCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service)
):
    """Store the message, ask the AI provider and store its reply"""
    return AIChatService(db, ai_service).process_message(current_user, session_id, message_in.content)
