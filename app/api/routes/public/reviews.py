from uuid import UUID
from typing import List
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_user
from app.models.user import User, GuideProfile, TravelerProfile
from app.models.reservation import Reservation
from app.models.review_report import Review
from app.schemas.review_report import ReviewCreate, ReviewUpdate, Review as ReviewSchema
from app.utils.slots import as_utc

router = APIRouter(prefix="/reviews", tags=["Reviews"])

REVIEW_EDIT_WINDOW = timedelta(hours=24)


def refresh_rating(db: Session, subject_user_id: UUID) -> None:
    """Recompute rating_avg / rating_count on the subject's profile from published reviews."""
    count, avg = (
        db.query(func.count(Review.id), func.avg(Review.rating))
        .filter(Review.subject_user_id == subject_user_id, Review.status == "published")
        .one()
    )
    rating = round(float(avg), 1) if avg is not None else 0

    profile = (
        db.query(GuideProfile).filter(GuideProfile.uid == subject_user_id).first()
        or db.query(TravelerProfile).filter(TravelerProfile.uid == subject_user_id).first()
    )
    if profile:
        profile.rating_avg = rating
        profile.rating_count = count


@router.get("", response_model=List[ReviewSchema])
def list_reviews(db: Session = Depends(get_db)):
    return db.query(Review).order_by(Review.created_at.desc()).all()


@router.get("/guide/{guide_uid}", response_model=List[ReviewSchema])
def list_guide_reviews(guide_uid: UUID, db: Session = Depends(get_db)):
    """Published reviews about a guide, newest first."""
    return (
        db.query(Review)
        .filter(Review.subject_user_id == guide_uid, Review.status == "published")
        .order_by(Review.created_at.desc())
        .all()
    )


@router.get("/author/{author_uid}", response_model=List[ReviewSchema])
def list_author_reviews(author_uid: UUID, db: Session = Depends(get_db)):
    return (
        db.query(Review)
        .filter(Review.author_user_id == author_uid)
        .order_by(Review.created_at.desc())
        .all()
    )


@router.post("", response_model=ReviewSchema)
def submit_review(data: ReviewCreate, db: Session = Depends(get_db)):
    """
    Review the other party of a reservation.

    Rules:
    - The reservation must be accepted or completed.
    - Author and subject must be its traveler and guide (either way round).
    - One review per author per reservation (409 otherwise).
    """
    reservation = db.query(Reservation).filter(Reservation.id == data.reservation_id).first()
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    if reservation.status not in ("accepted", "completed"):
        raise HTTPException(status_code=400, detail="Only accepted or completed reservations can be reviewed")

    participants = {reservation.traveler_id, reservation.guide_id}
    if {data.author_user_id, data.subject_user_id} != participants:
        raise HTTPException(status_code=400, detail="Author and subject must be the reservation's traveler and guide")

    if db.query(Review).filter(
        Review.author_user_id == data.author_user_id,
        Review.reservation_id == data.reservation_id,
    ).first():
        raise HTTPException(status_code=409, detail="You have already reviewed this reservation")

    review = Review(
        subject_user_id=data.subject_user_id,
        author_user_id=data.author_user_id,
        reservation_id=data.reservation_id,
        rating=data.rating,
        text=data.text,
        status=data.status or "published",
    )
    db.add(review)
    db.flush()
    refresh_rating(db, data.subject_user_id)
    db.commit()
    db.refresh(review)
    return review


@router.patch("/{review_id}", response_model=ReviewSchema)
def update_review(
    review_id: UUID,
    data: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    - The author may change rating/text within 24 hours of posting.
      The first edit keeps the original text.
    - The subject may post a response.
    """
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    now = datetime.now(timezone.utc)

    edits = {k: v for k, v in updates.items() if k in ("rating", "text")}
    if edits:
        if current_user.id != review.author_user_id:
            raise HTTPException(status_code=403, detail="Only the author can edit a review")
        if review.created_at and now - as_utc(review.created_at) > REVIEW_EDIT_WINDOW:
            raise HTTPException(status_code=403, detail="Reviews can only be edited within 24 hours")
        if "text" in edits and review.original_text is None and edits["text"] != review.text:
            review.original_text = review.text
        for field, value in edits.items():
            setattr(review, field, value)
        review.edited_at = now

    if "response_text" in updates:
        if current_user.id != review.subject_user_id:
            raise HTTPException(status_code=403, detail="Only the reviewed user can respond")
        review.response_text = updates["response_text"]
        review.response_at = now

    if "rating" in edits:
        db.flush()
        refresh_rating(db, review.subject_user_id)

    db.commit()
    db.refresh(review)
    return review
