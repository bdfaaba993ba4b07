from typing import Optional, List, Literal
from pydantic import BaseModel, UUID4, Field
from datetime import date, time, datetime

from app.schemas.availability import SlotDuration

ReservationStatus = Literal["pending", "accepted", "cancelled", "completed", "refunded"]


class SessionRequest(BaseModel):
    date: date
    start_time: time
    duration_hours: SlotDuration


class Meeting(BaseModel):
    type: str
    address: Optional[str] = None


# Reservation — Create (POST /reservations)
class ReservationCreate(BaseModel):
    traveler_id: UUID4
    guide_id: UUID4
    slot_id: Optional[UUID4] = None
    sessions: List[SessionRequest] = Field(min_length=1)
    meeting: Meeting
    itinerary_note: Optional[str] = None


# Reservation — Status update (PATCH /reservations/{id})
class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus


class Reservation(BaseModel):
    id: UUID4
    traveler_id: UUID4
    guide_id: UUID4
    slot_id: Optional[UUID4] = None
    status: str
    currency: str
    subtotal: int
    traveler_fee_pct: int
    platform_commission_pct: int
    platform_commission_min_usd: int
    total: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Booking(BaseModel):
    id: UUID4
    reservation_id: UUID4
    traveler_id: UUID4
    guide_id: UUID4
    sessions: List[dict]
    meeting: dict
    itinerary_note: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReservationCreateResponse(BaseModel):
    reservation: Reservation
    booking: Booking
    slot_reserved: bool


# GET /guides/{uid}/quote
class Quote(BaseModel):
    duration_hours: int
    sessions: int
    currency: str
    subtotal: int
    traveler_fee_pct: int
    traveler_fee: int
    total: int
    platform_commission_pct: int
    platform_commission_min_usd: int
    platform_commission: int
    description: str
