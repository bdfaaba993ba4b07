from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_admin_user
from app.models.user import User
from app.models.city import City
from app.schemas.city import City as CitySchema, CityCreate, CityUpdate

router = APIRouter(prefix="/admin/cities", tags=["Admin - Cities"])


def _check_slug_free(db: Session, slug: str, exclude_id: Optional[UUID] = None) -> None:
    query = db.query(City.id).filter(City.slug == slug)
    if exclude_id:
        query = query.filter(City.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail=f"City slug '{slug}' already exists")


@router.get("", response_model=List[CitySchema])
def list_cities(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return db.query(City).order_by(City.name).all()


@router.post("", response_model=CitySchema, status_code=status.HTTP_201_CREATED)
def create_city(
    data: CityCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    _check_slug_free(db, data.slug)
    city = City(**data.model_dump())
    city.country_code = city.country_code.upper()
    db.add(city)
    db.commit()
    db.refresh(city)
    return city


@router.patch("/{city_id}", response_model=CitySchema)
def update_city(
    city_id: UUID,
    data: CityUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise HTTPException(status_code=404, detail="City not found")

    updates = data.model_dump(exclude_unset=True)
    if "slug" in updates:
        _check_slug_free(db, updates["slug"], exclude_id=city_id)
    if "country_code" in updates:
        updates["country_code"] = updates["country_code"].upper()

    for field, value in updates.items():
        setattr(city, field, value)

    db.commit()
    db.refresh(city)
    return city


@router.delete("/{city_id}", status_code=status.HTTP_200_OK)
def delete_city(
    city_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise HTTPException(status_code=404, detail="City not found")
    db.delete(city)
    db.commit()
    return {"success": True}
