from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_admin_user
from app.models.user import User
from app.schemas.admin import OnboardingResetResult, UserSearchResult
from app.schemas.base import MessageResponse
from app.schemas.onboarding import OnboardingStatus
from app.schemas.user import PasswordResetRequest
from app.services.onboarding_service import OnboardingService
from app.services.user_service import UserService
from app.utils.audit import audit

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=UserSearchResult)
def find_users(
    email: str = "",
    limit: int = Query(25, ge=1, le=100),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user),
):
    """Find users (admin only) by email fragment"""
    total, users = UserService(db).search_users(email, limit=limit)
    return {"total": total, "users": users}


@router.post("/users/{user_id}/onboarding/reset", response_model=OnboardingResetResult)
def reset_user_onboarding(
    user_id: str,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user),
):
    """Delete the user's profile and financial data and clear every onboarding flag"""
    service = OnboardingService(db)
    counts = service.reset(user_id)
    audit("ADMIN_ONBOARDING_RESET", user_id=user_id, admin_id=current_admin.id)
    return {"user_id": user_id, **counts, "status": service.get_status(user_id)}


@router.post("/users/{user_id}/onboarding/recompute", response_model=OnboardingStatus)
def recompute_user_onboarding(
    user_id: str,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user),
):
    """Re-derive the onboarding flags from stored data"""
    service = OnboardingService(db)
    service.recompute(user_id)
    return service.get_status(user_id)


@router.post("/users/{user_id}/password", response_model=MessageResponse)
def reset_user_password(
    user_id: str,
    payload: PasswordResetRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user),
):
    user_service = UserService(db)
    user = user_service.require_user(user_id)
    user_service.update_user_password(user, payload.new_password)
    audit("ADMIN_PASSWORD_RESET", user_id=user_id, admin_id=current_admin.id)
    return {"message": f"Password updated for {user.email}"}
