from sqlalchemy.orm import Session
from sqlalchemy.sql import func
from typing import Any, Dict, List, Optional
import logging

from app.core.exceptions import NotFoundError
from app.models.chat import ChatMessage, ChatSession, ChatTypeEnum, MessageRoleEnum

logger = logging.getLogger(__name__)


class ChatService:
    """Persistence for chat sessions and their messages."""

    def __init__(self, db: Session):
        self.db = db

    def create_session(
        self,
        user_id: str,
        title: Optional[str] = None,
        chat_type: ChatTypeEnum = ChatTypeEnum.GENERAL,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ChatSession:
        session = ChatSession(
            user_id=user_id,
            title=title or "New Chat",
            type=chat_type,
            session_metadata=metadata or {},
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        logger.info(f"Created chat session {session.id} ({chat_type.value}) for user {user_id}")
        return session

    def list_sessions(self, user_id: str, limit: int = 50) -> List[ChatSession]:
        return (
            self.db.query(ChatSession)
            .filter(ChatSession.user_id == user_id)
            .order_by(ChatSession.updated_at.desc(), ChatSession.created_at.desc())
            .limit(limit)
            .all()
        )

    def get_session(self, session_id: str, user_id: str) -> ChatSession:
        """Fetch a session owned by ``user_id``; other users' sessions are reported as missing."""
        session = (
            self.db.query(ChatSession)
            .filter(ChatSession.id == session_id, ChatSession.user_id == user_id)
            .first()
        )
        if session is None:
            raise NotFoundError("Chat session not found")
        return session

    def get_messages(self, session_id: str, user_id: str, limit: int = 100, offset: int = 0) -> List[ChatMessage]:
        self.get_session(session_id, user_id)
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.created_at.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def add_message(
        self,
        session: ChatSession,
        role: MessageRoleEnum,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ChatMessage:
        message = ChatMessage(
            session_id=session.id,
            role=role,
            content=content,
            message_metadata=metadata or {},
        )
        self.db.add(message)
        session.updated_at = func.now()
        self.db.commit()
        self.db.refresh(message)
        return message

    def delete_session(self, session_id: str, user_id: str) -> None:
        session = self.get_session(session_id, user_id)
        self.db.delete(session)
        self.db.commit()
        logger.info(f"Deleted chat session {session_id} for user {user_id}")
