from sqlalchemy import Column, String, DateTime, Date, ForeignKey, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.core.database import Base
from app.models.user import generate_id


class GenderEnum(enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class MaritalStatusEnum(enum.Enum):
    SINGLE = "SINGLE"
    MARRIED = "MARRIED"
    DIVORCED = "DIVORCED"
    WIDOWED = "WIDOWED"


# Fields the Profile Stage must carry before it counts as completed
REQUIRED_PROFILE_FIELDS = ("date_of_birth", "occupation")


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    # Personal information
    date_of_birth = Column(Date, nullable=True)
    gender = Column(SQLEnum(GenderEnum, name="gender"), nullable=True)
    occupation = Column(String, nullable=True)
    company = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    marital_status = Column(SQLEnum(MaritalStatusEnum, name="maritalstatus"), nullable=True)
    dependents = Column(Integer, nullable=True)
    education_level = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="profile")

    def is_complete(self) -> bool:
        """True when every required Profile Stage field is populated."""
        for field in REQUIRED_PROFILE_FIELDS:
            value = getattr(self, field)
            if value is None or (isinstance(value, str) and not value.strip()):
                return False
        return True

    def __repr__(self):
        return f"<UserProfile user={self.user_id}>"
