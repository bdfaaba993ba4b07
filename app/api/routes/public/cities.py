from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.city import City
from app.models.user import GuideProfile
from app.schemas.city import City as CitySchema, CityDetail
from app.schemas.user import GuideProfile as GuideProfileSchema

router = APIRouter(prefix="/cities", tags=["Cities"])


@router.get("", response_model=List[CitySchema])
def list_cities(db: Session = Depends(get_db)):
    return db.query(City).order_by(City.name).all()


@router.get("/{slug}", response_model=CityDetail)
def get_city(slug: str, db: Session = Depends(get_db)):
    """City by slug, with the guides based there."""
    city = db.query(City).filter(City.slug == slug).first()
    if not city:
        raise HTTPException(status_code=404, detail="City not found")

    guides = db.query(GuideProfile).filter(GuideProfile.city_slug == slug).all()
    return CityDetail(
        **CitySchema.model_validate(city).model_dump(),
        guide_count=len(guides),
        guides=[GuideProfileSchema.model_validate(g) for g in guides],
    )
