from sqlalchemy import Column, String, DateTime, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
import enum

from app.core.database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class UserRoleEnum(enum.Enum):
    CLIENT = "CLIENT"
    CONSULTANT = "CONSULTANT"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    role = Column(SQLEnum(UserRoleEnum, name="userrole"), default=UserRoleEnum.CLIENT, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Email verification
    is_verified = Column(Boolean, default=False, nullable=False)
    email_verification_token = Column(String, nullable=True, index=True)
    email_verification_expires_at = Column(DateTime(timezone=True), nullable=True)
    verification_last_sent_at = Column(DateTime(timezone=True), nullable=True)

    # Onboarding completion flags (owned by OnboardingService)
    onboarding_completed = Column(Boolean, default=False, nullable=False)
    profile_completed = Column(Boolean, default=False, nullable=False)
    financial_data_completed = Column(Boolean, default=False, nullable=False)
    onboarding_skipped_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    financial_data = relationship(
        "FinancialData",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="FinancialData.created_at",
    )
    chat_sessions = relationship("ChatSession", back_populates="user", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRoleEnum.ADMIN

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self):
        return f"<User {self.email}>"
