"""
Onboarding completion tracking.

A user moves through two data-collection stages: the Profile Stage
(personal information) and the Financial Stage (a financial snapshot).
Three flags persisted on the User record summarise progress:

* ``profile_completed``: a profile exists and its required fields are set
* ``financial_data_completed``: at least one financial snapshot exists
* ``onboarding_completed``: both of the above

``onboarding_completed`` is only ever written through ``_apply_flags`` so it
can never be true while either stage flag is false.
"""
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional, Tuple
from datetime import datetime, timezone
import logging

from app.core.exceptions import NotFoundError, ValidationError
from app.models.financial_data import FinancialData
from app.models.user import User
from app.models.user_profile import UserProfile
from app.services.financial_service import FinancialDataService
from app.services.profile_service import UserProfileService
from app.utils.audit import audit

logger = logging.getLogger(__name__)

ONBOARDING_STEPS = ("profile", "financial")


class OnboardingService:
    def __init__(self, db: Session):
        self.db = db
        self.profiles = UserProfileService(db)
        self.financial = FinancialDataService(db)

    def _get_user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _apply_flags(user: User, profile_completed: bool, financial_data_completed: bool) -> None:
        user.profile_completed = profile_completed
        user.financial_data_completed = financial_data_completed
        user.onboarding_completed = profile_completed and financial_data_completed

    def _stage_state(self, user_id: str) -> Tuple[Optional[UserProfile], int]:
        return self.profiles.get_profile(user_id), self.financial.count(user_id)

    # --- Completion Aggregator -------------------------------------------

    def recompute(self, user_id: str, commit: bool = True) -> User:
        """Derive the three flags from the stored stage records and persist them."""
        user = self._get_user(user_id)
        profile, snapshots = self._stage_state(user_id)
        previous = (user.profile_completed, user.financial_data_completed, user.onboarding_completed)

        self._apply_flags(
            user,
            profile_completed=profile is not None and profile.is_complete(),
            financial_data_completed=snapshots > 0,
        )
        if commit:
            self.db.commit()
            self.db.refresh(user)

        current = (user.profile_completed, user.financial_data_completed, user.onboarding_completed)
        if current != previous:
            audit(
                "ONBOARDING_FLAGS",
                user_id=user.id,
                profile_completed=user.profile_completed,
                financial_data_completed=user.financial_data_completed,
                onboarding_completed=user.onboarding_completed,
            )
        return user

    # --- Status Reporter -------------------------------------------------

    def get_status(self, user_id: str) -> Dict[str, bool]:
        user = self._get_user(user_id)
        profile, snapshots = self._stage_state(user_id)
        return {
            "onboarding_completed": bool(user.onboarding_completed),
            "profile_completed": bool(user.profile_completed),
            "financial_data_completed": bool(user.financial_data_completed),
            "has_profile": profile is not None,
            "has_financial_data": snapshots > 0,
            "onboarding_skipped": user.onboarding_skipped_at is not None,
            "needs_onboarding": self._needs_onboarding(user),
        }

    @staticmethod
    def _needs_onboarding(user: User) -> bool:
        return not user.onboarding_completed and user.onboarding_skipped_at is None

    def needs_onboarding(self, user_id: str) -> bool:
        return self._needs_onboarding(self._get_user(user_id))

    # --- Stage submissions -----------------------------------------------

    def submit_profile_stage(self, user_id: str, data: Dict[str, Any], replace: bool = False) -> UserProfile:
        self._get_user(user_id)
        profile = self.profiles.upsert_profile(user_id, data, replace=replace)
        self.recompute(user_id, commit=False)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def submit_financial_stage(self, user_id: str, data: Dict[str, Any]) -> FinancialData:
        self._get_user(user_id)
        snapshot = self.financial.create_snapshot(user_id, data)
        self.recompute(user_id, commit=False)
        self.db.commit()
        self.db.refresh(snapshot)
        return snapshot

    def remove_profile(self, user_id: str) -> None:
        self._get_user(user_id)
        if not self.profiles.delete_profile(user_id):
            raise NotFoundError("Profile not found")
        self.recompute(user_id, commit=False)
        self.db.commit()

    # --- Manual step control ---------------------------------------------

    def set_step(self, user_id: str, step: str, completed: bool) -> User:
        """Mark a stage complete or incomplete.

        Completing a stage is only accepted when its data actually satisfies
        the aggregator; clearing a stage always succeeds.
        """
        if step not in ONBOARDING_STEPS:
            raise ValidationError('Invalid step. Must be "profile" or "financial"', error_code="invalid_step")
        user = self._get_user(user_id)
        profile, snapshots = self._stage_state(user_id)
        profile_ok = profile is not None and profile.is_complete()
        financial_ok = snapshots > 0

        profile_flag = bool(user.profile_completed)
        financial_flag = bool(user.financial_data_completed)
        if step == "profile":
            if completed and not profile_ok:
                raise ValidationError("Profile stage data has not been submitted", error_code="stage_incomplete")
            profile_flag = completed
        else:
            if completed and not financial_ok:
                raise ValidationError("Financial stage data has not been submitted", error_code="stage_incomplete")
            financial_flag = completed

        self._apply_flags(user, profile_flag, financial_flag)
        self.db.commit()
        self.db.refresh(user)
        audit("ONBOARDING_STEP", user_id=user.id, step=step, completed=completed)
        return user

    def skip(self, user_id: str, reason: Optional[str] = None) -> User:
        """Let the user defer onboarding. Completion flags are left untouched."""
        user = self._get_user(user_id)
        if user.onboarding_skipped_at is None:
            user.onboarding_skipped_at = datetime.now(timezone.utc)
            self.db.commit()
            self.db.refresh(user)
        audit("ONBOARDING_SKIPPED", user_id=user.id, reason=reason)
        return user

    # --- Administrative reset --------------------------------------------

    def reset(self, user_id: str) -> Dict[str, int]:
        """Wipe Profile and FinancialData rows and clear every onboarding flag."""
        user = self._get_user(user_id)
        profiles_deleted = self.profiles.delete_profile(user_id)
        financial_deleted = self.financial.delete_all(user_id)
        self._apply_flags(user, False, False)
        user.onboarding_skipped_at = None
        self.db.commit()
        logger.info(
            f"Reset onboarding for user {user_id}: "
            f"{profiles_deleted} profile(s), {financial_deleted} financial record(s) deleted"
        )
        audit(
            "ONBOARDING_RESET",
            user_id=user_id,
            profiles_deleted=profiles_deleted,
            financial_records_deleted=financial_deleted,
        )
        return {"profiles_deleted": profiles_deleted, "financial_records_deleted": financial_deleted}
