from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Numeric, Boolean, Text, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.core.database import Base
from app.models.user import generate_id


class BookingStatusEnum(enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


class Consultant(Base):
    __tablename__ = "consultants"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    specialization = Column(String, nullable=False)
    experience_years = Column(Integer, nullable=False, default=0)
    certifications = Column(JSON, nullable=False, default=list)
    hourly_rate = Column(Numeric(14, 2), nullable=False)
    bio = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bookings = relationship("Booking", back_populates="consultant")

    def __repr__(self):
        return f"<Consultant {self.name} ({self.specialization})>"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    consultant_id = Column(String(36), ForeignKey("consultants.id"), nullable=False, index=True)

    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    service = Column(String, nullable=False)
    duration = Column(Integer, nullable=False, default=60)  # minutes
    notes = Column(Text, nullable=True)
    price = Column(Numeric(14, 2), nullable=False)
    status = Column(SQLEnum(BookingStatusEnum, name="bookingstatus"), nullable=False, default=BookingStatusEnum.PENDING)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="bookings")
    consultant = relationship("Consultant", back_populates="bookings")
