# Import all models here for Alembic
from app.models.user import User
from app.models.user_profile import UserProfile
from app.models.financial_data import FinancialData
from app.models.chat import ChatSession, ChatMessage
from app.models.consultant import Consultant, Booking

__all__ = [
    "User",
    "UserProfile",
    "FinancialData",
    "ChatSession",
    "ChatMessage",
    "Consultant",
    "Booking",
]
