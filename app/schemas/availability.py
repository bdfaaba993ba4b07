from typing import Optional, Literal
from pydantic import BaseModel, UUID4
from datetime import datetime

SlotDuration = Literal[4, 6, 8]
SlotStatus = Literal["open", "pending", "booked", "closed"]
# pending and booked are only reached through the reservation flow
GuideSlotStatus = Literal["open", "closed"]


# Slot — Create (POST /guides/availability)
class SlotCreate(BaseModel):
    guide_id: UUID4
    start_time: datetime
    duration_hours: SlotDuration


# Slot — Update (PATCH /availability/{id})
class SlotUpdate(BaseModel):
    status: Optional[GuideSlotStatus] = None
    start_time: Optional[datetime] = None
    duration_hours: Optional[SlotDuration] = None


# Slot — DB response
class Slot(BaseModel):
    id: UUID4
    guide_id: UUID4
    start_time: datetime
    end_time: datetime
    duration_hours: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
