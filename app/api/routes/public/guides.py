from dataclasses import asdict
from uuid import UUID
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User, GuideProfile
from app.schemas.user import GuideProfile as GuideProfileSchema, GuideProfileUpdate
from app.schemas.reservation import Quote
from app.utils.pricing import quote_reservation, DURATION_LABELS
from app.utils.slug import make_unique_handle

router = APIRouter(prefix="/guides", tags=["Guides"])

DEFAULT_PRICES = {"h4": 100, "h6": 140, "h8": 180, "currency": "USD"}

# Non-nullable GuideProfile columns
REQUIRED_PROFILE_FIELDS = {
    "handle", "city", "city_slug", "country", "timezone", "bio",
    "languages", "themes", "photos", "prices", "max_group_size",
}


@router.get("", response_model=List[GuideProfileSchema])
def list_guides(
    city_slug: Optional[str] = Query(None, description="Only guides based in this city"),
    db: Session = Depends(get_db),
):
    query = db.query(GuideProfile)
    if city_slug:
        query = query.filter(GuideProfile.city_slug == city_slug)
    return query.order_by(GuideProfile.display_name).all()


@router.get("/{handle}", response_model=GuideProfileSchema)
def get_guide(handle: str, db: Session = Depends(get_db)):
    guide = db.query(GuideProfile).filter(GuideProfile.handle == handle).first()
    if not guide:
        raise HTTPException(status_code=404, detail="Guide not found")
    return guide


@router.get("/{uid}/quote", response_model=Quote)
def get_quote(
    uid: UUID,
    duration_hours: Literal[4, 6, 8] = Query(4),
    sessions: int = Query(1, ge=1, le=10),
    db: Session = Depends(get_db),
):
    """Price a prospective reservation exactly as POST /reservations would."""
    guide = db.query(GuideProfile).filter(GuideProfile.uid == uid).first()
    if not guide:
        raise HTTPException(status_code=404, detail="Guide not found")
    try:
        quote = quote_reservation(guide, [duration_hours] * sessions)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Quote(
        duration_hours=duration_hours,
        sessions=sessions,
        description=DURATION_LABELS[duration_hours],
        **asdict(quote),
    )


@router.patch("/{uid}", response_model=GuideProfileSchema)
def upsert_guide(uid: UUID, data: GuideProfileUpdate, db: Session = Depends(get_db)):
    """
    Update a guide profile, creating it with defaults on first save.
    Null is ignored for required fields; optional ones such as
    base_rate_hour or tagline are cleared by it.
    """
    updates = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field not in REQUIRED_PROFILE_FIELDS
    }
    guide = db.query(GuideProfile).filter(GuideProfile.uid == uid).first()

    if "handle" in updates:
        taken = db.query(GuideProfile.uid).filter(
            GuideProfile.handle == updates["handle"], GuideProfile.uid != uid
        ).first()
        if taken:
            raise HTTPException(status_code=400, detail="Handle already taken")

    if not guide:
        user = db.query(User).filter(User.id == uid).first()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        guide = GuideProfile(
            uid=uid,
            handle=updates.pop("handle", None) or make_unique_handle(db, user.display_name),
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            city=updates.pop("city", None) or "Barcelona",
            city_slug=updates.pop("city_slug", None) or "barcelona",
            country=updates.pop("country", None) or "Spain",
            timezone=updates.pop("timezone", None) or "Europe/Madrid",
            bio=updates.pop("bio", None) or "",
            languages=updates.pop("languages", None) or ["English"],
            themes=updates.pop("themes", None) or ["General Tours"],
            photos=updates.pop("photos", None) or [],
            prices=updates.pop("prices", None) or DEFAULT_PRICES,
            max_group_size=updates.pop("max_group_size", None) or 6,
            rating_avg=0,
            rating_count=0,
        )
        db.add(guide)

    for field, value in updates.items():
        setattr(guide, field, value)

    db.commit()
    db.refresh(guide)
    return guide
