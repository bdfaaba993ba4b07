import uuid
import secrets
from sqlalchemy import Column, String, Boolean, DateTime, func, Text, ForeignKey, Uuid
from app.db.session import Base

class ContactSubmission(Base):
    __tablename__ = "contact_submissions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    gdpr_consent = Column(Boolean, nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
    status = Column(String(20), nullable=False, default="new")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class NewsletterSubscription(Base):
    __tablename__ = "newsletter_subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    token = Column(String(64), unique=True, nullable=False, default=lambda: secrets.token_urlsafe(32))
    status = Column(String(20), nullable=False, default="pending") # pending, confirmed
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
