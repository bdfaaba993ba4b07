import uuid
from sqlalchemy import Column, String, DateTime, func, Integer, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base

class Review(Base):
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    subject_user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    author_user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    reservation_id = Column(Uuid, ForeignKey("reservations.id"), nullable=False)
    rating = Column(Integer, nullable=False) # 1-5
    text = Column(Text, nullable=False)
    response_text = Column(Text, nullable=True)
    response_at = Column(DateTime(timezone=True), nullable=True)
    original_text = Column(Text, nullable=True)
    edited_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(20), nullable=False, default="published", index=True) # published, hidden, reported
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    author = relationship("User", foreign_keys=[author_user_id])
    subject = relationship("User", foreign_keys=[subject_user_id])

class Report(Base):
    __tablename__ = "reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    type = Column(String(20), nullable=False) # profile, review, message
    target_id = Column(String(64), nullable=False)
    reason = Column(Text, nullable=False)
    reporter_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    status = Column(String(20), nullable=False, default="open") # open, closed
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    resolved_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    resolution_note = Column(Text, nullable=True)
