from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_staff_user
from app.api.routes.public.reviews import refresh_rating
from app.models.user import User
from app.models.review_report import Review, Report
from app.schemas.review_report import (
    Review as ReviewSchema,
    ReviewStatusUpdate,
    Report as ReportSchema,
    ReportResolve,
)

reviews_router = APIRouter(prefix="/admin/reviews", tags=["Admin - Moderation"])
reports_router = APIRouter(prefix="/admin/reports", tags=["Admin - Moderation"])


@reviews_router.get("", response_model=List[ReviewSchema])
def list_reviews(
    status: Optional[str] = Query(None, description="published, hidden, reported"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff_user),
):
    query = db.query(Review)
    if status:
        query = query.filter(Review.status == status)
    return query.order_by(Review.created_at.desc()).all()


@reviews_router.patch("/{review_id}", response_model=ReviewSchema)
def set_review_status(
    review_id: UUID,
    data: ReviewStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff_user),
):
    """Publish, hide or flag a review. The subject's rating follows published reviews only."""
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    review.status = data.status
    db.flush()
    refresh_rating(db, review.subject_user_id)
    db.commit()
    db.refresh(review)
    return review


@reports_router.get("", response_model=List[ReportSchema])
def list_reports(
    status: Optional[str] = Query(None, description="open, closed"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff_user),
):
    query = db.query(Report)
    if status:
        query = query.filter(Report.status == status)
    return query.order_by(Report.created_at.desc()).all()


@reports_router.patch("/{report_id}/resolve", response_model=ReportSchema)
def resolve_report(
    report_id: UUID,
    data: ReportResolve,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_staff_user),
):
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    if report.status == "closed":
        raise HTTPException(status_code=409, detail="Report is already closed")

    report.status = "closed"
    report.resolved_by = current_user.id
    report.resolution_note = data.resolution_note
    db.commit()
    db.refresh(report)
    return report
