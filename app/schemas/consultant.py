from pydantic import Field
from typing import List, Optional
from datetime import datetime

from app.models.consultant import BookingStatusEnum
from app.schemas.base import APIModel


class Consultant(APIModel):
    id: str
    name: str
    specialization: str
    experience_years: int
    certifications: List[str] = Field(default_factory=list)
    hourly_rate: float
    bio: Optional[str] = None
    location: Optional[str] = None
    is_active: bool


class BookingCreate(APIModel):
    consultant_id: str
    scheduled_at: datetime
    service: str = Field(..., min_length=1, max_length=200)
    duration: Optional[int] = Field(None, ge=30, le=240, description="Duration in minutes (30-240)")
    notes: Optional[str] = Field(None, max_length=2000)


class BookingStatusUpdate(APIModel):
    status: BookingStatusEnum


class Booking(APIModel):
    id: str
    user_id: str
    consultant_id: str
    scheduled_at: datetime
    service: str
    duration: int
    notes: Optional[str] = None
    price: float
    status: BookingStatusEnum
    created_at: Optional[datetime] = None
    consultant: Optional[Consultant] = None
