from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
import logging

from app.core.exceptions import NotFoundError
from app.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


class UserProfileService:
    """Profile Stage storage: at most one UserProfile per user."""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.db.query(UserProfile).filter(UserProfile.user_id == user_id).first()

    def require_profile(self, user_id: str) -> UserProfile:
        profile = self.get_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    def upsert_profile(self, user_id: str, data: Dict[str, Any], replace: bool = False) -> UserProfile:
        """Create the profile or update it in place.

        ``replace=True`` resets fields missing from ``data`` to None (PUT);
        otherwise only the given fields are written (PATCH). The caller
        commits.
        """
        profile = self.get_profile(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)
            self.db.add(profile)
            logger.info(f"Creating profile for user {user_id}")
        elif replace:
            for column in UserProfile.__table__.columns.keys():
                if column not in ("id", "user_id", "created_at", "updated_at"):
                    setattr(profile, column, None)

        for field, value in data.items():
            setattr(profile, field, value)
        self.db.flush()
        return profile

    def delete_profile(self, user_id: str) -> int:
        """Delete the user's profile if present; returns rows deleted. The caller commits."""
        return (
            self.db.query(UserProfile)
            .filter(UserProfile.user_id == user_id)
            .delete(synchronize_session=False)
        )
