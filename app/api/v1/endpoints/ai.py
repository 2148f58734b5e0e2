from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_active_user
from app.models.user import User
from app.schemas.chat import FinancialInsights
from app.services.ai_chat_service import AIChatService
from app.services.ai_service import AIService, get_ai_service

router = APIRouter()


@router.get("/insights", response_model=FinancialInsights)
async def get_financial_insights(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service)
):
    """AI-generated insights on the latest financial snapshot"""
    return AIChatService(db, ai_service).generate_insights(current_user)
