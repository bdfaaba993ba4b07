from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.models.availability_slot import AvailabilitySlot
from app.models.reservation import Reservation

SLOT_DURATIONS = (4, 6, 8)

# current status -> statuses it may move to
SLOT_TRANSITIONS = {
    "open": {"pending", "closed"},
    "pending": {"booked", "open", "closed"},
    "booked": {"open", "closed"},
    "closed": {"open"},
}

# Reservation statuses that hold on to their slot
ACTIVE_RESERVATION_STATUSES = ("pending", "accepted")


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def slot_end(start_time: datetime, duration_hours: int) -> datetime:
    return start_time + timedelta(hours=duration_hours)


def can_transition(current: str, new: str) -> bool:
    return new in SLOT_TRANSITIONS.get(current, set())


def check_transition(slot: AvailabilitySlot, new_status: str) -> None:
    """Raise 400 if `slot` may not move to `new_status`."""
    if not can_transition(slot.status, new_status):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change slot status from '{slot.status}' to '{new_status}'",
        )


def find_overlapping_slot(
    db: Session,
    guide_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_slot_id: Optional[UUID] = None,
) -> Optional[AvailabilitySlot]:
    """Return a non-closed slot of the guide that intersects [start_time, end_time)."""
    filters = [
        AvailabilitySlot.guide_id == guide_id,
        AvailabilitySlot.status != "closed",
        AvailabilitySlot.start_time < end_time,
        AvailabilitySlot.end_time > start_time,
    ]
    if exclude_slot_id:
        filters.append(AvailabilitySlot.id != exclude_slot_id)
    return db.query(AvailabilitySlot).filter(*filters).first()


def check_no_overlap(
    db: Session,
    guide_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_slot_id: Optional[UUID] = None,
) -> None:
    """Raise 400 if the guide already has a slot in that window."""
    conflict = find_overlapping_slot(db, guide_id, start_time, end_time, exclude_slot_id)
    if conflict:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Slot overlaps with existing slot {conflict.id} "
                f"({conflict.start_time} for {conflict.duration_hours}h)"
            ),
        )


def claim_slot(db: Session, slot_id: UUID) -> bool:
    """
    Move a slot from 'open' to 'pending' with a single conditional UPDATE.

    Returns False when the slot was no longer open, so two concurrent
    reservations cannot both take it. Does not commit; the caller commits
    together with the reservation it creates.
    """
    result = db.execute(
        update(AvailabilitySlot)
        .where(AvailabilitySlot.id == slot_id, AvailabilitySlot.status == "open")
        .values(status="pending", updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session="evaluate")
    )
    return result.rowcount == 1


def release_slot(db: Session, slot: Optional[AvailabilitySlot]) -> None:
    """Put a pending/booked slot back on the market."""
    if slot and slot.status in ("pending", "booked"):
        slot.status = "open"


def close_past_slots(db: Session) -> int:
    """
    Close every open slot whose start time has already passed.

    Returns the number of slots closed.
    """
    now = datetime.now(timezone.utc)
    count = (
        db.query(AvailabilitySlot)
        .filter(
            AvailabilitySlot.status == "open",
            AvailabilitySlot.start_time < now,
        )
        .update({"status": "closed"}, synchronize_session=False)
    )
    db.commit()
    return count


def has_active_reservation(db: Session, slot_id: UUID) -> bool:
    return db.query(Reservation.id).filter(
        Reservation.slot_id == slot_id,
        Reservation.status.in_(ACTIVE_RESERVATION_STATUSES),
    ).first() is not None


def check_no_active_reservation(db: Session, slot: AvailabilitySlot) -> None:
    """Raise 400 if a pending or accepted reservation still holds `slot`."""
    if has_active_reservation(db, slot.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Slot {slot.id} is held by an active reservation; cancel the reservation first",
        )
