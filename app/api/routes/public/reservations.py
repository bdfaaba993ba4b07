import logging
from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.availability_slot import AvailabilitySlot
from app.models.conversation import Conversation
from app.models.reservation import Reservation, Booking
from app.models.user import GuideProfile
from app.schemas.reservation import (
    ReservationCreate,
    ReservationCreateResponse,
    ReservationStatusUpdate,
    Reservation as ReservationSchema,
    Booking as BookingSchema,
)
from app.utils.pricing import quote_reservation
from app.utils.slots import claim_slot, release_slot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reservations", tags=["Reservations"])
bookings_router = APIRouter(prefix="/bookings", tags=["Reservations"])

# current status -> statuses it may move to
RESERVATION_TRANSITIONS = {
    "pending": {"accepted", "cancelled"},
    "accepted": {"completed", "cancelled"},
    "completed": {"refunded"},
    "cancelled": {"refunded"},
    "refunded": set(),
}

# Booking status that follows a reservation status change
BOOKING_STATUS_FOR = {
    "accepted": "accepted",
    "cancelled": "cancelled",
    "completed": "completed",
}


# ---------------------------------------------------------------------------
# POST /reservations — request a guide, optionally against an open slot
# ---------------------------------------------------------------------------


@router.post("", response_model=ReservationCreateResponse)
def create_reservation(data: ReservationCreate, db: Session = Depends(get_db)):
    """
    Create a pending reservation and its booking.

    When `slot_id` is given the slot must be open and belong to the guide; it
    is moved to 'pending' by a conditional update in the same transaction as
    the reservation, so a slot can never be claimed twice and a failed insert
    leaves it open.
    """
    guide = db.query(GuideProfile).filter(GuideProfile.uid == data.guide_id).first()
    if not guide:
        raise HTTPException(status_code=404, detail="Guide not found")

    if data.slot_id:
        slot = db.query(AvailabilitySlot).filter(AvailabilitySlot.id == data.slot_id).first()
        if not slot:
            raise HTTPException(status_code=404, detail="Slot not found")
        if slot.guide_id != data.guide_id:
            raise HTTPException(status_code=400, detail="Slot does not belong to this guide")
        if slot.status != "open":
            raise HTTPException(status_code=400, detail="Slot is no longer available")

    try:
        quote = quote_reservation(guide, [s.duration_hours for s in data.sessions])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        if data.slot_id and not claim_slot(db, data.slot_id):
            db.rollback()
            raise HTTPException(status_code=400, detail="Slot is no longer available")

        reservation = Reservation(
            traveler_id=data.traveler_id,
            guide_id=data.guide_id,
            slot_id=data.slot_id,
            status="pending",
            currency=quote.currency,
            subtotal=quote.subtotal,
            traveler_fee_pct=quote.traveler_fee_pct,
            platform_commission_pct=quote.platform_commission_pct,
            platform_commission_min_usd=quote.platform_commission_min_usd,
            total=quote.total,
        )
        db.add(reservation)
        db.flush()  # get reservation.id

        booking = Booking(
            reservation_id=reservation.id,
            traveler_id=data.traveler_id,
            guide_id=data.guide_id,
            sessions=[s.model_dump(mode="json") for s in data.sessions],
            meeting=data.meeting.model_dump(mode="json"),
            itinerary_note=data.itinerary_note,
            status="pending",
        )
        db.add(booking)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create reservation for guide %s", data.guide_id)
        raise HTTPException(status_code=500, detail="Failed to create reservation")

    db.refresh(reservation)
    db.refresh(booking)
    logger.info(
        "Reservation %s created (guide=%s, slot=%s, total=%s %s)",
        reservation.id, data.guide_id, data.slot_id, reservation.total, reservation.currency,
    )
    return ReservationCreateResponse(
        reservation=ReservationSchema.model_validate(reservation),
        booking=BookingSchema.model_validate(booking),
        slot_reserved=data.slot_id is not None,
    )


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@router.get("/traveler/{traveler_id}", response_model=List[ReservationSchema])
def list_traveler_reservations(traveler_id: UUID, db: Session = Depends(get_db)):
    return (
        db.query(Reservation)
        .filter(Reservation.traveler_id == traveler_id)
        .order_by(Reservation.created_at.desc())
        .all()
    )


@router.get("/guide/{guide_id}", response_model=List[ReservationSchema])
def list_guide_reservations(guide_id: UUID, db: Session = Depends(get_db)):
    return (
        db.query(Reservation)
        .filter(Reservation.guide_id == guide_id)
        .order_by(Reservation.created_at.desc())
        .all()
    )


@router.get("/{reservation_id}", response_model=ReservationSchema)
def get_reservation(reservation_id: UUID, db: Session = Depends(get_db)):
    reservation = db.query(Reservation).filter(Reservation.id == reservation_id).first()
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return reservation


# ---------------------------------------------------------------------------
# PATCH /reservations/{id} — status machine
# ---------------------------------------------------------------------------


@router.patch("/{reservation_id}", response_model=ReservationSchema)
def update_reservation_status(
    reservation_id: UUID,
    data: ReservationStatusUpdate,
    db: Session = Depends(get_db),
):
    """
    Move a reservation along its lifecycle.

    - accepted: opens the traveler/guide conversation and books the slot.
    - cancelled: puts the slot back on the market.
    - The attached booking follows accepted/cancelled/completed.
    """
    reservation = db.query(Reservation).filter(Reservation.id == reservation_id).first()
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")

    new_status = data.status
    if new_status not in RESERVATION_TRANSITIONS.get(reservation.status, set()):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change reservation from '{reservation.status}' to '{new_status}'",
        )

    if new_status == "accepted" and reservation.slot and reservation.slot.status != "pending":
        raise HTTPException(status_code=400, detail="Slot is no longer available")

    reservation.status = new_status

    if new_status == "accepted":
        if not reservation.conversation:
            db.add(Conversation(
                reservation_id=reservation.id,
                participant_ids=[str(reservation.traveler_id), str(reservation.guide_id)],
            ))
        if reservation.slot:
            reservation.slot.status = "booked"
    elif new_status == "cancelled":
        release_slot(db, reservation.slot)

    booking_status = BOOKING_STATUS_FOR.get(new_status)
    if booking_status and reservation.booking:
        reservation.booking.status = booking_status

    db.commit()
    db.refresh(reservation)
    logger.info("Reservation %s -> %s", reservation.id, new_status)
    return reservation


# ---------------------------------------------------------------------------
# GET /bookings
# ---------------------------------------------------------------------------


@bookings_router.get("", response_model=List[BookingSchema])
def list_bookings(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    query = db.query(Booking)
    if status:
        query = query.filter(Booking.status == status)
    return query.order_by(Booking.created_at.desc()).all()
