from sqlalchemy.orm import Session
from typing import Any, Dict, List
from datetime import datetime, timezone
import logging

from app.core.exceptions import ExternalServiceError
from app.models.chat import ChatTypeEnum, MessageRoleEnum
from app.models.user import User
from app.services.ai_service import AIService
from app.services.chat_service import ChatService
from app.services.financial_service import FinancialDataService
from app.services.profile_service import UserProfileService
from app.utils.audit import audit

logger = logging.getLogger(__name__)

# Earlier turns replayed to the model with each new message
HISTORY_WINDOW = 10

SYSTEM_PROMPTS = {
    ChatTypeEnum.FINANCIAL_PLANNING: (
        "You are a personal financial planner for young professionals. Focus on budgeting, "
        "savings plans and reaching short and long term financial goals."
    ),
    ChatTypeEnum.INVESTMENT_ADVICE: (
        "You are an experienced investment consultant. Recommend investments that match the "
        "user's risk profile and explain the trade-offs plainly."
    ),
    ChatTypeEnum.BUDGET_HELP: (
        "You are a budgeting coach. Analyse spending, point out waste and suggest realistic "
        "ways to save each month."
    ),
    ChatTypeEnum.GENERAL: (
        "You are a friendly personal-finance assistant. Answer questions about money "
        "management in a practical, personal way."
    ),
}

ANSWER_GUIDELINES = (
    "Answers must be practical and actionable, easy to follow, and grounded in the user's "
    "profile data when it is available."
)


class AIChatService:
    """Sends chat messages to the AI provider with the user's onboarding data as context."""

    def __init__(self, db: Session, ai_service: AIService):
        self.db = db
        self.ai = ai_service
        self.chats = ChatService(db)
        self.profiles = UserProfileService(db)
        self.financial = FinancialDataService(db)

    def build_user_context(self, user: User) -> Dict[str, Any]:
        profile = self.profiles.get_profile(user.id)
        snapshot = self.financial.get_latest(user.id)
        context: Dict[str, Any] = {"name": user.full_name or user.username}
        if profile is not None:
            context.update({
                "occupation": profile.occupation,
                "marital_status": profile.marital_status.value if profile.marital_status else None,
                "dependents": profile.dependents,
            })
        if snapshot is not None:
            context.update(snapshot.to_context())
        return {key: value for key, value in context.items() if value not in (None, [], "")}

    @staticmethod
    def _describe_context(context: Dict[str, Any]) -> str:
        if not context:
            return "No profile information has been provided by the user yet."
        lines = ["User context:"]
        for key, value in context.items():
            if isinstance(value, list):
                value = ", ".join(str(item) for item in value)
            elif isinstance(value, float):
                value = f"{value:,.0f}"
            lines.append(f"- {key.replace('_', ' ').capitalize()}: {value}")
        return "\n".join(lines)

    def build_system_prompt(self, chat_type: ChatTypeEnum, context: Dict[str, Any]) -> str:
        base = SYSTEM_PROMPTS.get(chat_type, SYSTEM_PROMPTS[ChatTypeEnum.GENERAL])
        return f"{base}\n\n{self._describe_context(context)}\n\n{ANSWER_GUIDELINES}"

    def _history(self, session) -> List[Dict[str, str]]:
        turns = [
            {"role": "user" if m.role == MessageRoleEnum.USER else "assistant", "content": m.content}
            for m in session.messages
            if m.role in (MessageRoleEnum.USER, MessageRoleEnum.ASSISTANT)
        ]
        return turns[-HISTORY_WINDOW:]

    def process_message(self, user: User, session_id: str, content: str) -> Dict[str, Any]:
        session = self.chats.get_session(session_id, user.id)
        history = self._history(session)
        context = self.build_user_context(user)

        user_message = self.chats.add_message(session, MessageRoleEnum.USER, content)
        try:
            reply = self.ai.chat_reply(self.build_system_prompt(session.type, context), history, content)
        except ExternalServiceError as e:
            audit("AI_CHAT", user_id=user.id, session_id=session.id, success=False, error=e.message)
            raise

        ai_message = self.chats.add_message(
            session,
            MessageRoleEnum.ASSISTANT,
            reply["content"],
            metadata={
                "model": reply["model"],
                "tokens": reply["tokens"],
                "processingTimeMs": reply["processing_time_ms"],
            },
        )
        audit(
            "AI_CHAT",
            user_id=user.id,
            session_id=session.id,
            success=True,
            tokens=reply["tokens"],
            processing_time_ms=reply["processing_time_ms"],
        )
        return {
            "user_message": user_message,
            "ai_message": ai_message,
            "session": {"id": session.id, "type": session.type, "title": session.title},
        }

    def generate_insights(self, user: User) -> Dict[str, Any]:
        self.financial.require_latest(user.id)
        context = self.build_user_context(user)
        result = self.ai.generate_financial_insights(context)
        result["generated_at"] = datetime.now(timezone.utc)
        logger.info(f"Generated financial insights for user {user.id}")
        return result
