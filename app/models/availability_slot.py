import uuid
from sqlalchemy import Column, String, DateTime, func, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base

class AvailabilitySlot(Base):
    __tablename__ = "availability_slots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    guide_id = Column(Uuid, ForeignKey("guide_profiles.uid"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True) # UTC
    end_time = Column(DateTime(timezone=True), nullable=False) # start_time + duration_hours
    duration_hours = Column(Integer, nullable=False) # 4, 6 or 8
    status = Column(String(20), nullable=False, default="open", index=True) # open, pending, booked, closed
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    guide = relationship("GuideProfile", back_populates="slots")
    reservations = relationship("Reservation", back_populates="slot")
