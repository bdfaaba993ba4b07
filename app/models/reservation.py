import uuid
from sqlalchemy import Column, String, DateTime, func, Integer, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base

class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    traveler_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    guide_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    slot_id = Column(Uuid, ForeignKey("availability_slots.id"), nullable=True, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True) # pending, accepted, cancelled, completed, refunded
    currency = Column(String(3), nullable=False, default="USD")
    subtotal = Column(Integer, nullable=False)
    traveler_fee_pct = Column(Integer, nullable=False)
    platform_commission_pct = Column(Integer, nullable=False)
    platform_commission_min_usd = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    traveler = relationship("User", foreign_keys=[traveler_id])
    guide = relationship("User", foreign_keys=[guide_id])
    slot = relationship("AvailabilitySlot", back_populates="reservations")
    booking = relationship("Booking", back_populates="reservation", uselist=False, cascade="all, delete-orphan")
    conversation = relationship("Conversation", back_populates="reservation", uselist=False, cascade="all, delete-orphan")

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    reservation_id = Column(Uuid, ForeignKey("reservations.id"), unique=True, nullable=False)
    traveler_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    guide_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    sessions = Column(JSON, nullable=False) # [{"date", "start_time", "duration_hours"}]
    meeting = Column(JSON, nullable=False) # {"type", "address"}
    itinerary_note = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending") # pending, accepted, cancelled, completed
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    reservation = relationship("Reservation", back_populates="booking")
