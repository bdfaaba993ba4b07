from typing import Optional, Literal
from pydantic import BaseModel, UUID4, Field
from datetime import datetime

ReviewStatus = Literal["published", "hidden", "reported"]


class ReviewCreate(BaseModel):
    subject_user_id: UUID4
    author_user_id: UUID4
    reservation_id: UUID4
    rating: int = Field(ge=1, le=5)
    text: str = Field(min_length=1, max_length=500)
    status: Optional[ReviewStatus] = None


# Author edits (rating/text) and guide responses (response_text)
class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    text: Optional[str] = Field(None, min_length=1, max_length=500)
    response_text: Optional[str] = Field(None, max_length=500)


class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus


class Review(BaseModel):
    id: UUID4
    subject_user_id: UUID4
    author_user_id: UUID4
    reservation_id: UUID4
    rating: int
    text: str
    response_text: Optional[str] = None
    response_at: Optional[datetime] = None
    original_text: Optional[str] = None
    edited_at: Optional[datetime] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReportCreate(BaseModel):
    type: Literal["profile", "review", "message"]
    target_id: str = Field(min_length=1)
    reason: str = Field(min_length=1)
    reporter_id: UUID4
    status: Optional[Literal["open", "closed"]] = None


class ReportResolve(BaseModel):
    resolution_note: Optional[str] = None


class Report(BaseModel):
    id: UUID4
    type: str
    target_id: str
    reason: str
    reporter_id: UUID4
    status: str
    created_at: Optional[datetime] = None
    resolved_by: Optional[UUID4] = None
    resolution_note: Optional[str] = None

    class Config:
        from_attributes = True
