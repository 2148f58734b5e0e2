from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.database import get_db
from app.core.deps import get_current_active_user
from app.models.user import User
from app.schemas.consultant import Booking, BookingCreate, BookingStatusUpdate, Consultant
from app.services.consultant_service import ConsultantService

router = APIRouter()


@router.get("", response_model=List[Consultant])
async def list_consultants(
    specialization: Optional[str] = None,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Active consultants, optionally filtered by specialization"""
    return ConsultantService(db).list_active(specialization)


# Booking routes are declared before /{consultant_id} so "bookings" is not read as an id

@router.post("/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_in: BookingCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return ConsultantService(db).create_booking(current_user.id, booking_in.model_dump())


@router.get("/bookings/my", response_model=List[Booking])
async def my_bookings(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return ConsultantService(db).list_user_bookings(current_user.id)


@router.patch("/bookings/{booking_id}/status", response_model=Booking)
async def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Clients may only cancel their own bookings"""
    return ConsultantService(db).update_booking_status(booking_id, current_user.id, payload.status)


@router.get("/{consultant_id}", response_model=Consultant)
async def get_consultant(
    consultant_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return ConsultantService(db).get_consultant(consultant_id)
