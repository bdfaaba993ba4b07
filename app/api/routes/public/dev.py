import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.db.seed import seed_database, reset_database
from app.schemas.common import MessageResponse

logger = logging.getLogger(__name__)


def _require_dev():
    if settings.is_production:
        raise HTTPException(status_code=404, detail="Not found")


router = APIRouter(tags=["Dev"], dependencies=[Depends(_require_dev)])


@router.post("/seed", response_model=MessageResponse)
def seed(db: Session = Depends(get_db)):
    seed_database(db)
    return MessageResponse(message="Database seeded successfully")


@router.post("/reset", response_model=MessageResponse)
def reset(db: Session = Depends(get_db)):
    reset_database(db)
    seed_database(db)
    logger.warning("Database reset and reseeded")
    return MessageResponse(message="Database reset and reseeded successfully")
