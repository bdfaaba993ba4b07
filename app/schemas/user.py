from typing import Optional, List, Literal, Dict, Any
from decimal import Decimal
from pydantic import BaseModel, EmailStr, UUID4, Field
from datetime import datetime

from app.models.user import Role


# Properties to receive via API on creation (POST /auth/register)
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    display_name: str = Field(min_length=1)
    avatar_url: Optional[str] = None
    role: Literal["traveler", "guide"] = "traveler"


# Properties to receive via API on admin creation (POST /auth/admin/register)
class AdminCreate(UserCreate):
    admin_secret: str


class User(BaseModel):
    id: UUID4
    email: Optional[str] = None
    role: Role
    display_name: str
    avatar_url: Optional[str] = None
    status: Optional[str] = None
    verified: Optional[bool] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Compact user for nested responses
class UserSummary(BaseModel):
    id: UUID4
    display_name: str
    email: Optional[str] = None

    class Config:
        from_attributes = True


class UserAdminUpdate(BaseModel):
    status: Optional[Literal["active", "suspended"]] = None
    verified: Optional[bool] = None


class Token(BaseModel):
    access_token: str
    token_type: str
    user: User


class DemoLoginRequest(BaseModel):
    role: Literal["traveler", "guide", "admin"]
    display_name: Optional[str] = Field(None, min_length=1)
    user_id: Optional[UUID4] = None


class DemoUsers(BaseModel):
    travelers: List[User]
    guides: List[User]
    admins: List[User]


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


class TierPrices(BaseModel):
    h4: int = Field(gt=0)
    h6: int = Field(gt=0)
    h8: int = Field(gt=0)
    currency: str = "USD"


class GuideProfile(BaseModel):
    uid: UUID4
    handle: str
    display_name: str
    avatar_url: Optional[str] = None
    city: str
    city_slug: str
    country: str
    timezone: str
    bio: str
    tagline: Optional[str] = None
    years_experience: Optional[int] = None
    languages: List[str]
    themes: List[str]
    photos: List[str]
    prices: Dict[str, Any]
    base_rate_hour: Optional[Decimal] = None
    max_group_size: int
    rating_avg: Optional[Decimal] = None
    rating_count: Optional[int] = None
    verified: Optional[bool] = None
    meetup_pref: Optional[Dict[str, Any]] = None
    social_links: Optional[Dict[str, str]] = None

    class Config:
        from_attributes = True


class GuideProfileUpdate(BaseModel):
    handle: Optional[str] = None
    city: Optional[str] = None
    city_slug: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None
    bio: Optional[str] = None
    tagline: Optional[str] = None
    years_experience: Optional[int] = Field(None, ge=0)
    languages: Optional[List[str]] = None
    themes: Optional[List[str]] = None
    photos: Optional[List[str]] = None
    prices: Optional[TierPrices] = None
    base_rate_hour: Optional[Decimal] = Field(None, gt=0)
    max_group_size: Optional[int] = Field(None, ge=1)
    meetup_pref: Optional[Dict[str, Any]] = None
    social_links: Optional[Dict[str, str]] = None


class TravelerProfile(BaseModel):
    uid: UUID4
    display_name: str
    avatar_url: Optional[str] = None
    home_country: Optional[str] = None
    preferred_language: Optional[str] = None
    bio: Optional[str] = None
    rating_avg: Optional[Decimal] = None
    rating_count: Optional[int] = None

    class Config:
        from_attributes = True


class TravelerProfileUpdate(BaseModel):
    home_country: Optional[str] = None
    preferred_language: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
