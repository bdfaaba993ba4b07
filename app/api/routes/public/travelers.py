from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User, TravelerProfile
from app.schemas.user import TravelerProfile as TravelerProfileSchema, TravelerProfileUpdate

router = APIRouter(prefix="/travelers", tags=["Travelers"])


@router.get("", response_model=List[TravelerProfileSchema])
def list_travelers(db: Session = Depends(get_db)):
    return db.query(TravelerProfile).order_by(TravelerProfile.display_name).all()


@router.patch("/{uid}", response_model=TravelerProfileSchema)
def upsert_traveler(uid: UUID, data: TravelerProfileUpdate, db: Session = Depends(get_db)):
    """Update a traveler profile, creating an empty one on first save."""
    traveler = db.query(TravelerProfile).filter(TravelerProfile.uid == uid).first()
    if not traveler:
        user = db.query(User).filter(User.id == uid).first()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        traveler = TravelerProfile(uid=uid, display_name=user.display_name, avatar_url=user.avatar_url)
        db.add(traveler)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(traveler, field, value)

    db.commit()
    db.refresh(traveler)
    return traveler
