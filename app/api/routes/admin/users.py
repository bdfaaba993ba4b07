from uuid import UUID
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_admin_user
from app.models.user import User, GuideProfile
from app.schemas.user import (
    User as UserSchema,
    UserAdminUpdate,
    GuideProfile as GuideProfileSchema,
)
from app.schemas.common import PaginatedResponse

router = APIRouter(prefix="/admin/users", tags=["Admin - Users"])
guides_router = APIRouter(prefix="/admin/guides", tags=["Admin - Guides"])


@router.get("", response_model=PaginatedResponse[UserSchema])
def list_users(
    role: Optional[str] = Query(None, description="traveler, guide, admin, support, moderator"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)

    total = query.count()
    users = (
        query.order_by(User.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return PaginatedResponse(
        data=[UserSchema.model_validate(u) for u in users],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


@router.patch("/{user_id}", response_model=UserSchema)
def update_user(
    user_id: UUID,
    data: UserAdminUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Suspend/reactivate or verify an account. Roles cannot be changed."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == current_user.id and data.status == "suspended":
        raise HTTPException(status_code=400, detail="You cannot suspend yourself")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    if data.verified is not None and user.guide_profile:
        user.guide_profile.verified = data.verified

    db.commit()
    db.refresh(user)
    return user


@guides_router.get("", response_model=PaginatedResponse[GuideProfileSchema])
def list_guides(
    city_slug: Optional[str] = None,
    verified: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    query = db.query(GuideProfile)
    if city_slug:
        query = query.filter(GuideProfile.city_slug == city_slug)
    if verified is not None:
        query = query.filter(GuideProfile.verified == verified)

    total = query.count()
    guides = (
        query.order_by(GuideProfile.display_name)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return PaginatedResponse(
        data=[GuideProfileSchema.model_validate(g) for g in guides],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )
