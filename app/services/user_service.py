from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from datetime import datetime, timedelta, timezone
import logging
import secrets

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_refresh_token,
)
from app.models.user import User, UserRoleEnum
from app.schemas.user import UserCreate
from app.services.email_service import EmailService
from app.utils.audit import audit

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class UserService:
    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        self.db = db
        self.email = email_service or EmailService()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def require_user(self, user_id: str) -> User:
        user = self.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def search_users(self, email_fragment: str = "", limit: int = 25) -> Tuple[int, List[User]]:
        query = self.db.query(User)
        if email_fragment:
            query = query.filter(User.email.ilike(f"%{email_fragment.lower()}%"))
        total = query.count()
        return total, query.order_by(User.created_at.desc()).limit(limit).all()

    def _unique_username(self, requested: Optional[str], email: str) -> str:
        base = (requested or email.split("@")[0]).strip().lower()
        username = base
        counter = 1
        while self.db.query(User.id).filter(User.username == username).first() is not None:
            username = f"{base}{counter}"
            counter += 1
        return username

    def _issue_verification_token(self, user: User) -> str:
        token = secrets.token_hex(32)
        user.email_verification_token = token
        user.email_verification_expires_at = datetime.now(timezone.utc) + timedelta(
            hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS
        )
        return token

    def create_user(self, user_create: UserCreate) -> User:
        """Register a new account. Raises ConflictError on a duplicate email."""
        email = user_create.email.lower()
        if self.get_user_by_email(email):
            audit("REGISTER", email=email, result="duplicate")
            raise ConflictError("User with this email already exists")

        db_user = User(
            email=email,
            username=self._unique_username(user_create.username, email),
            password_hash=get_password_hash(user_create.password),
            first_name=user_create.first_name,
            last_name=user_create.last_name,
            role=UserRoleEnum.CLIENT,
            is_active=True,
            is_verified=False,
            onboarding_completed=False,
            profile_completed=False,
            financial_data_completed=False,
        )
        token = self._issue_verification_token(db_user)
        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)

        # Delivery failure must not undo the registration
        sent = self.email.send_verification_email(db_user.email, db_user.first_name or db_user.username, token)
        db_user.verification_last_sent_at = datetime.now(timezone.utc)
        self.db.commit()
        audit("REGISTER", email=db_user.email, user_id=db_user.id, result="created", email_sent=bool(sent))
        logger.info(f"Registered user {db_user.id}")
        return db_user

    def authenticate_user(self, email: str, password: str) -> User:
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            audit("LOGIN", email=email, result="invalid_credentials")
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            audit("LOGIN", email=email, user_id=user.id, result="inactive")
            raise AuthenticationError("Account has been deactivated")
        if settings.REQUIRE_EMAIL_VERIFICATION and not user.is_verified:
            audit("LOGIN", email=email, user_id=user.id, result="unverified")
            raise AuthenticationError("Email not verified. Please check your inbox for the verification link.")
        audit("LOGIN", email=email, user_id=user.id, result="success")
        return user

    def issue_tokens(self, user: User) -> dict:
        claims = {"sub": user.id, "email": user.email}
        return {
            "access_token": create_access_token(claims),
            "refresh_token": create_refresh_token(claims),
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    def refresh_tokens(self, refresh_token: str) -> dict:
        user_id = verify_refresh_token(refresh_token)
        user = self.get_user_by_id(user_id) if user_id else None
        if user is None or not user.is_active:
            raise AuthenticationError("Invalid refresh token")
        return self.issue_tokens(user)

    def verify_email(self, token: str) -> User:
        if not token:
            raise ValidationError("Verification token is required")
        user = self.db.query(User).filter(User.email_verification_token == token).first()
        if (
            user is None
            or user.email_verification_expires_at is None
            or datetime.now(timezone.utc) > _as_utc(user.email_verification_expires_at)
        ):
            audit("VERIFY_EMAIL", result="invalid_or_expired")
            raise ValidationError("Verification token is invalid or has expired")
        if not user.is_active:
            audit("VERIFY_EMAIL", email=user.email, user_id=user.id, result="inactive")
            raise AuthenticationError("Account has been deactivated")

        user.is_verified = True
        user.email_verification_token = None
        user.email_verification_expires_at = None
        self.db.commit()
        self.db.refresh(user)
        audit("VERIFY_EMAIL", email=user.email, user_id=user.id, result="success")
        return user

    def resend_verification(self, email: str) -> bool:
        """Issue a fresh verification link. Returns False when nothing was sent."""
        user = self.get_user_by_email(email)
        if user is None or user.is_verified:
            audit("RESEND_VERIFICATION", email=email, result="skipped")
            return False
        token = self._issue_verification_token(user)
        user.verification_last_sent_at = datetime.now(timezone.utc)
        self.db.commit()
        sent = self.email.send_verification_email(user.email, user.first_name or user.username, token)
        audit("RESEND_VERIFICATION", email=email, user_id=user.id, result="sent", email_sent=bool(sent))
        return sent

    def update_names(self, user: User, first_name: Optional[str], last_name: Optional[str]) -> User:
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_user_password(self, user: User, new_password: str) -> User:
        """Update user password"""
        user.password_hash = get_password_hash(new_password)
        self.db.commit()
        self.db.refresh(user)
        audit("PASSWORD_RESET", email=user.email, user_id=user.id)
        return user
