from typing import Optional, List
from pydantic import BaseModel, UUID4, Field
from datetime import datetime

from app.schemas.user import GuideProfile


class CityCreate(BaseModel):
    name: str = Field(min_length=1)
    country_code: str = Field(min_length=2, max_length=2)
    slug: str = Field(min_length=1)
    country: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    timezone: str = "UTC"


class CityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    country_code: Optional[str] = Field(None, min_length=2, max_length=2)
    slug: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    timezone: Optional[str] = None


class City(BaseModel):
    id: UUID4
    name: str
    slug: str
    country_code: str
    country: Optional[str] = None
    timezone: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# GET /cities/{slug} — city plus the guides working there
class CityDetail(City):
    guide_count: int
    guides: List[GuideProfile] = []
