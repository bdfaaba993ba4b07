from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.user import User
from app.models.review_report import Report
from app.schemas.review_report import ReportCreate, Report as ReportSchema

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("", response_model=List[ReportSchema])
def list_reports(db: Session = Depends(get_db)):
    return db.query(Report).order_by(Report.created_at.desc()).all()


@router.post("", response_model=ReportSchema)
def create_report(data: ReportCreate, db: Session = Depends(get_db)):
    """Flag a profile, review or message for moderation."""
    if not db.query(User.id).filter(User.id == data.reporter_id).first():
        raise HTTPException(status_code=404, detail="Reporter not found")

    report = Report(
        type=data.type,
        target_id=data.target_id,
        reason=data.reason,
        reporter_id=data.reporter_id,
        status=data.status or "open",
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report
