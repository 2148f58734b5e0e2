from sqlalchemy.orm import Session, joinedload
from typing import Any, Dict, List, Optional
from decimal import Decimal
import logging

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.consultant import Booking, BookingStatusEnum, Consultant
from app.utils.audit import audit

logger = logging.getLogger(__name__)

DEFAULT_CONSULTANTS = [
    {
        "name": "Sarah Wijaya, CFP",
        "specialization": "Financial Planning",
        "experience_years": 8,
        "certifications": ["CFP", "RFP"],
        "hourly_rate": Decimal("500000"),
        "bio": "Helps young professionals build budgets, emergency funds and long-term savings plans.",
        "location": "Jakarta",
    },
    {
        "name": "Budi Santoso, CFA",
        "specialization": "Investment Advisory",
        "experience_years": 12,
        "certifications": ["CFA", "WMI"],
        "hourly_rate": Decimal("750000"),
        "bio": "Portfolio construction for first-time investors across mutual funds, bonds and equities.",
        "location": "Surabaya",
    },
    {
        "name": "Dewi Lestari",
        "specialization": "Debt Management",
        "experience_years": 6,
        "certifications": ["RFP"],
        "hourly_rate": Decimal("400000"),
        "bio": "Debt consolidation and repayment strategies for credit cards and personal loans.",
        "location": "Bandung",
    },
]

# Statuses a booking can no longer move out of
FINAL_STATUSES = {BookingStatusEnum.CANCELLED, BookingStatusEnum.COMPLETED, BookingStatusEnum.NO_SHOW}


class ConsultantService:
    def __init__(self, db: Session):
        self.db = db

    def list_active(self, specialization: Optional[str] = None) -> List[Consultant]:
        query = self.db.query(Consultant).filter(Consultant.is_active == True)  # noqa: E712
        if specialization:
            query = query.filter(Consultant.specialization.ilike(f"%{specialization}%"))
        return query.order_by(Consultant.name.asc()).all()

    def get_consultant(self, consultant_id: str) -> Consultant:
        consultant = self.db.query(Consultant).filter(Consultant.id == consultant_id).first()
        if consultant is None:
            raise NotFoundError("Consultant not found")
        return consultant

    def create_booking(self, user_id: str, data: Dict[str, Any]) -> Booking:
        consultant = self.get_consultant(data["consultant_id"])
        if not consultant.is_active:
            raise ValidationError("Consultant is not accepting bookings", error_code="consultant_inactive")

        duration = data.get("duration") or settings.DEFAULT_BOOKING_DURATION_MINUTES
        price = (Decimal(consultant.hourly_rate) * duration / 60).quantize(Decimal("0.01"))

        booking = Booking(
            user_id=user_id,
            consultant_id=consultant.id,
            scheduled_at=data["scheduled_at"],
            service=data["service"],
            duration=duration,
            notes=data.get("notes"),
            price=price,
            status=BookingStatusEnum.PENDING,
        )
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        audit("BOOKING_CREATED", user_id=user_id, booking_id=booking.id, consultant_id=consultant.id)
        return booking

    def list_user_bookings(self, user_id: str) -> List[Booking]:
        return (
            self.db.query(Booking)
            .options(joinedload(Booking.consultant))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.scheduled_at.desc())
            .all()
        )

    def update_booking_status(self, booking_id: str, user_id: str, new_status: BookingStatusEnum) -> Booking:
        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id, Booking.user_id == user_id)
            .first()
        )
        if booking is None:
            raise NotFoundError("Booking not found")
        if new_status != BookingStatusEnum.CANCELLED:
            raise ValidationError("Bookings can only be cancelled by the client", error_code="status_not_allowed")
        if booking.status in FINAL_STATUSES and booking.status != new_status:
            raise ValidationError(
                f"Booking is already {booking.status.value.lower()}",
                error_code="booking_closed",
            )
        booking.status = new_status
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking_id} moved to {new_status.value}")
        return booking

    def seed_consultants(self) -> int:
        """Insert the default consultant directory when it is empty. Returns rows created."""
        if self.db.query(Consultant.id).first() is not None:
            return 0
        for entry in DEFAULT_CONSULTANTS:
            self.db.add(Consultant(**entry))
        self.db.commit()
        logger.info(f"Seeded {len(DEFAULT_CONSULTANTS)} consultants")
        return len(DEFAULT_CONSULTANTS)
