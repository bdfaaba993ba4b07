from uuid import UUID
from typing import Optional
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from app.db.session import get_db
from app.api.deps import get_current_admin_user
from app.models.user import User
from app.models.reservation import Booking, Reservation
from app.schemas.reservation import Booking as BookingSchema, Reservation as ReservationSchema
from app.schemas.user import UserSummary
from app.schemas.common import PaginatedResponse

router = APIRouter(prefix="/admin/bookings", tags=["Admin - Bookings"])


# Booking: admin view with reservation pricing and both parties
class AdminBooking(BookingSchema):
    reservation: Optional[ReservationSchema] = None
    traveler: Optional[UserSummary] = None
    guide: Optional[UserSummary] = None


def _serialize_admin_booking(booking: Booking) -> AdminBooking:
    reservation = booking.reservation
    return AdminBooking(
        **BookingSchema.model_validate(booking).model_dump(),
        reservation=ReservationSchema.model_validate(reservation) if reservation else None,
        traveler=UserSummary.model_validate(reservation.traveler) if reservation and reservation.traveler else None,
        guide=UserSummary.model_validate(reservation.guide) if reservation and reservation.guide else None,
    )


@router.get("", response_model=PaginatedResponse[AdminBooking])
def list_all_bookings(
    # --- Filters ---
    status: Optional[str] = Query(None, description="Filter by booking status (pending, accepted, cancelled, completed)"),
    guide_id: Optional[UUID] = Query(None, description="Filter by guide id"),
    created_from: Optional[datetime] = Query(None, description="Created at or after"),
    # --- Pagination ---
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Return every booking with its reservation and the traveler/guide involved."""
    query = db.query(Booking).options(
        joinedload(Booking.reservation).joinedload(Reservation.traveler),
        joinedload(Booking.reservation).joinedload(Reservation.guide),
    )
    if status:
        query = query.filter(Booking.status == status)
    if guide_id:
        query = query.filter(Booking.guide_id == guide_id)
    if created_from:
        query = query.filter(Booking.created_at >= created_from)

    total = query.count()
    bookings = (
        query.order_by(Booking.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PaginatedResponse(
        data=[_serialize_admin_booking(b) for b in bookings],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )
