from typing import List

from app.schemas.base import APIModel
from app.schemas.onboarding import OnboardingStatus
from app.schemas.user import User


class OnboardingResetResult(APIModel):
    user_id: str
    profiles_deleted: int
    financial_records_deleted: int
    status: OnboardingStatus


class UserSearchResult(APIModel):
    total: int
    users: List[User]
