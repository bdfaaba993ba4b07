import logging
from uuid import UUID
from typing import List, Optional
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.availability_slot import AvailabilitySlot
from app.models.user import GuideProfile
from app.schemas.availability import SlotCreate, SlotUpdate, SlotStatus, Slot as SlotSchema
from app.schemas.common import MessageResponse
from app.utils.slots import (
    as_utc,
    slot_end,
    check_no_overlap,
    check_transition,
    check_no_active_reservation,
    SLOT_DURATIONS,
)

logger = logging.getLogger(__name__)

guide_slots_router = APIRouter(prefix="/guides", tags=["Availability"])
router = APIRouter(prefix="/availability", tags=["Availability"])


# ---------------------------------------------------------------------------
# POST /guides/availability — guide publishes a slot
# ---------------------------------------------------------------------------


@guide_slots_router.post("/availability", response_model=SlotSchema)
def create_slot(data: SlotCreate, db: Session = Depends(get_db)):
    """
    Publish an open slot for a guide.
    - Start time must be in the future.
    - Must not overlap another non-closed slot of the same guide.
    """
    guide = db.query(GuideProfile).filter(GuideProfile.uid == data.guide_id).first()
    if not guide:
        raise HTTPException(status_code=404, detail="Guide not found")

    start_time = as_utc(data.start_time)
    if start_time < datetime.now(timezone.utc):
        raise HTTPException(status_code=400, detail="Start time must be in the future")

    end_time = slot_end(start_time, data.duration_hours)
    check_no_overlap(db, data.guide_id, start_time, end_time)

    slot = AvailabilitySlot(
        guide_id=data.guide_id,
        start_time=start_time,
        end_time=end_time,
        duration_hours=data.duration_hours,
        status="open",
    )
    db.add(slot)
    db.commit()
    db.refresh(slot)
    logger.info("Guide %s published slot %s at %s (%dh)", data.guide_id, slot.id, start_time, data.duration_hours)
    return slot


# ---------------------------------------------------------------------------
# GET /availability — slots of one guide
# ---------------------------------------------------------------------------


@router.get("", response_model=List[SlotSchema])
def list_slots(
    guide_id: UUID = Query(..., description="Guide whose slots to list"),
    from_: Optional[datetime] = Query(None, alias="from", description="Earliest start time"),
    to: Optional[datetime] = Query(None, description="Latest start time"),
    duration: Optional[int] = Query(None, description="4, 6 or 8 (open slots only)"),
    status: Optional[SlotStatus] = Query(None, description="Defaults to open"),
    db: Session = Depends(get_db),
):
    """Return a guide's slots ordered by start time. Without `status` only open slots are returned."""
    query = db.query(AvailabilitySlot).filter(AvailabilitySlot.guide_id == guide_id)

    if from_:
        query = query.filter(AvailabilitySlot.start_time >= as_utc(from_))
    if to:
        query = query.filter(AvailabilitySlot.start_time <= as_utc(to))

    if status is None or status == "open":
        query = query.filter(AvailabilitySlot.status == "open")
        if duration is not None:
            if duration not in SLOT_DURATIONS:
                raise HTTPException(status_code=400, detail="duration must be 4, 6 or 8")
            query = query.filter(AvailabilitySlot.duration_hours == duration)
    else:
        query = query.filter(AvailabilitySlot.status == status)

    return query.order_by(AvailabilitySlot.start_time).all()


@router.get("/{slot_id}", response_model=SlotSchema)
def get_slot(slot_id: UUID, db: Session = Depends(get_db)):
    slot = db.query(AvailabilitySlot).filter(AvailabilitySlot.id == slot_id).first()
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")
    return slot


# ---------------------------------------------------------------------------
# PATCH /availability/{id} — reschedule or change status
# ---------------------------------------------------------------------------


@router.patch("/{slot_id}", response_model=SlotSchema)
def update_slot(slot_id: UUID, data: SlotUpdate, db: Session = Depends(get_db)):
    slot = db.query(AvailabilitySlot).filter(AvailabilitySlot.id == slot_id).first()
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")

    updates = data.model_dump(exclude_unset=True, exclude_none=True)

    if "start_time" in updates or "duration_hours" in updates:
        if slot.status != "open":
            raise HTTPException(status_code=400, detail="Only open slots can be rescheduled")
        new_start = as_utc(updates.get("start_time", slot.start_time))
        new_duration = updates.get("duration_hours", slot.duration_hours)
        if "start_time" in updates and new_start < datetime.now(timezone.utc):
            raise HTTPException(status_code=400, detail="Start time must be in the future")
        new_end = slot_end(new_start, new_duration)
        check_no_overlap(db, slot.guide_id, new_start, new_end, exclude_slot_id=slot.id)
        slot.start_time = new_start
        slot.end_time = new_end
        slot.duration_hours = new_duration

    new_status = updates.get("status")
    if new_status and new_status != slot.status:
        check_transition(slot, new_status)
        if slot.status in ("pending", "booked"):
            check_no_active_reservation(db, slot)
        if slot.status == "closed" and new_status == "open":
            # Reopening must not collide with slots published since
            check_no_overlap(
                db, slot.guide_id, as_utc(slot.start_time), as_utc(slot.end_time),
                exclude_slot_id=slot.id,
            )
        slot.status = new_status

    db.commit()
    db.refresh(slot)
    return slot


@router.delete("/{slot_id}", response_model=MessageResponse)
def delete_slot(slot_id: UUID, db: Session = Depends(get_db)):
    slot = db.query(AvailabilitySlot).filter(AvailabilitySlot.id == slot_id).first()
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")
    if slot.status in ("pending", "booked"):
        raise HTTPException(
            status_code=400,
            detail=f"Slot is {slot.status}; cancel the reservation or close the slot instead",
        )
    if slot.reservations:
        # Keep history intact for slots that were once reserved
        slot.status = "closed"
    else:
        db.delete(slot)
    db.commit()
    return MessageResponse(message="Slot deleted successfully")
