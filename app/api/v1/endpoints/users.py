from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_active_user
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.onboarding import (
    FinancialInfoSubmission,
    FinancialStageResult,
    OnboardingStatus,
    OnboardingStepUpdate,
    PersonalInfoSubmission,
    Profile,
    ProfileStageResult,
    ProfileUpdate,
    SkipOnboardingRequest,
)
from app.schemas.user import User as UserSchema, UserUpdate
from app.services.onboarding_service import OnboardingService
from app.services.profile_service import UserProfileService
from app.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=UserSchema)
async def get_me(current_user: User = Depends(get_current_active_user)):
    """Get the authenticated user"""
    return current_user


@router.put("/me", response_model=UserSchema)
async def update_me(
    user_update: UserUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Update first / last name"""
    return UserService(db).update_names(current_user, user_update.first_name, user_update.last_name)


# --- Profile -------------------------------------------------------------

@router.get("/profile", response_model=Profile)
async def get_profile(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return UserProfileService(db).require_profile(current_user.id)


@router.put("/profile", response_model=Profile)
async def replace_profile(
    profile_in: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Create or fully replace the profile; omitted fields are cleared"""
    return OnboardingService(db).submit_profile_stage(
        current_user.id, profile_in.model_dump(exclude_unset=True), replace=True
    )


@router.patch("/profile", response_model=Profile)
async def update_profile(
    profile_in: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Create the profile or update only the fields sent"""
    return OnboardingService(db).submit_profile_stage(
        current_user.id, profile_in.model_dump(exclude_unset=True)
    )


@router.delete("/profile", response_model=MessageResponse)
async def delete_profile(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    OnboardingService(db).remove_profile(current_user.id)
    return {"message": "Profile deleted successfully"}


# --- Onboarding ----------------------------------------------------------

@router.get("/onboarding/status", response_model=OnboardingStatus)
async def get_onboarding_status(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return OnboardingService(db).get_status(current_user.id)


@router.post("/onboarding/profile", response_model=ProfileStageResult, status_code=status.HTTP_201_CREATED)
async def submit_onboarding_profile(
    submission: PersonalInfoSubmission,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Submit the personal-information stage"""
    service = OnboardingService(db)
    profile = service.submit_profile_stage(current_user.id, submission.model_dump(exclude_unset=True))
    return {"profile": profile, "status": service.get_status(current_user.id)}


@router.post("/onboarding/financial", response_model=FinancialStageResult, status_code=status.HTTP_201_CREATED)
async def submit_onboarding_financial(
    submission: FinancialInfoSubmission,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Submit the financial-snapshot stage"""
    service = OnboardingService(db)
    snapshot = service.submit_financial_stage(current_user.id, submission.model_dump())
    return {"financial_data": snapshot, "status": service.get_status(current_user.id)}


@router.post("/onboarding/skip", response_model=OnboardingStatus)
async def skip_onboarding(
    payload: SkipOnboardingRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Defer onboarding without marking it complete"""
    service = OnboardingService(db)
    service.skip(current_user.id, payload.reason)
    return service.get_status(current_user.id)


@router.patch("/onboarding/{step}", response_model=OnboardingStatus)
async def update_onboarding_step(
    step: str,
    payload: OnboardingStepUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Mark the profile or financial step complete / incomplete"""
    service = OnboardingService(db)
    service.set_step(current_user.id, step, payload.completed)
    return service.get_status(current_user.id)
