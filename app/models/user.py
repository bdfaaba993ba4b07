import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, func, Text, DECIMAL, Integer, ForeignKey, JSON, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.db.session import Base

class Role(str, enum.Enum):
    traveler = "traveler"
    guide = "guide"
    admin = "admin"
    support = "support"
    moderator = "moderator"

STAFF_ROLES = (Role.admin, Role.support, Role.moderator)

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=True, index=True)
    password_hash = Column(String(255), nullable=True) # NULL for demo users
    role = Column(SAEnum(Role, native_enum=False), nullable=False)
    display_name = Column(String(255), nullable=False)
    avatar_url = Column(Text, nullable=True)
    status = Column(String(20), default="active") # active, suspended
    verified = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    guide_profile = relationship("GuideProfile", back_populates="user", uselist=False)
    traveler_profile = relationship("TravelerProfile", back_populates="user", uselist=False)

class GuideProfile(Base):
    __tablename__ = "guide_profiles"

    uid = Column(Uuid, ForeignKey("users.id"), primary_key=True)
    handle = Column(String(100), unique=True, nullable=False, index=True)
    display_name = Column(String(255), nullable=False)
    avatar_url = Column(Text, nullable=True)
    city = Column(String(100), nullable=False)
    city_slug = Column(String(100), nullable=False, index=True)
    country = Column(String(100), nullable=False)
    timezone = Column(String(64), nullable=False)
    bio = Column(Text, nullable=False, default="")
    tagline = Column(String(255), nullable=True)
    years_experience = Column(Integer, nullable=True)
    languages = Column(JSON, nullable=False, default=list)
    themes = Column(JSON, nullable=False, default=list)
    photos = Column(JSON, nullable=False, default=list)
    prices = Column(JSON, nullable=False) # {"h4": .., "h6": .., "h8": .., "currency": "USD"}
    base_rate_hour = Column(DECIMAL(10, 2), nullable=True)
    max_group_size = Column(Integer, nullable=False, default=6)
    rating_avg = Column(DECIMAL(2, 1), default=0)
    rating_count = Column(Integer, default=0)
    verified = Column(Boolean, nullable=True)
    meetup_pref = Column(JSON, nullable=True)
    social_links = Column(JSON, nullable=True)

    user = relationship("User", back_populates="guide_profile")
    slots = relationship("AvailabilitySlot", back_populates="guide", cascade="all, delete-orphan")

class TravelerProfile(Base):
    __tablename__ = "traveler_profiles"

    uid = Column(Uuid, ForeignKey("users.id"), primary_key=True)
    display_name = Column(String(255), nullable=False)
    avatar_url = Column(Text, nullable=True)
    home_country = Column(String(100), nullable=True)
    preferred_language = Column(String(50), nullable=True)
    bio = Column(Text, nullable=True)
    rating_avg = Column(DECIMAL(2, 1), nullable=True)
    rating_count = Column(Integer, nullable=True)

    user = relationship("User", back_populates="traveler_profile")
