import random
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.config import settings
from app.core.security import create_access_token, get_password_hash, verify_password

from app.api.deps import get_current_user
from app.models.user import User, TravelerProfile, Role
from app.schemas.user import (
    UserCreate,
    AdminCreate,
    Token,
    DemoLoginRequest,
    DemoUsers,
    User as UserSchema,
)

router = APIRouter(prefix="/auth", tags=["auth"])
me_router = APIRouter(prefix="/me", tags=["auth"])


def _build_token_response(user: User) -> Token:
    role = user.role.value if isinstance(user.role, Role) else str(user.role)
    return Token(
        access_token=create_access_token(subject=str(user.id), role=role),
        token_type="bearer",
        user=UserSchema.model_validate(user),
    )


def _create_user(db: Session, body: UserCreate, role: str) -> User:
    if db.query(User).filter(User.email == body.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    user = User(
        email=body.email,
        password_hash=get_password_hash(body.password),
        display_name=body.display_name,
        avatar_url=body.avatar_url,
        role=role,
    )
    db.add(user)
    db.flush()
    if role == "traveler":
        db.add(TravelerProfile(uid=user.id, display_name=user.display_name, avatar_url=user.avatar_url))
    db.commit()
    db.refresh(user)
    return user


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db)):
    """Sign up as a traveler or guide. The role is fixed at creation."""
    return _build_token_response(_create_user(db, body, body.role))


@router.post("/admin/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def admin_register(body: AdminCreate, db: Session = Depends(get_db)):
    if body.admin_secret != settings.ADMIN_SECRET_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin secret",
        )
    return _build_token_response(_create_user(db, body, "admin"))


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == form_data.username).first()
    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if user.status == "suspended":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is suspended",
        )
    return _build_token_response(user)


# ---------------------------------------------------------------------------
# Demo accounts (no password), disabled in production
# ---------------------------------------------------------------------------


def _require_demo_mode():
    if settings.is_production:
        raise HTTPException(status_code=404, detail="Not found")


@router.get("/demo-users", response_model=DemoUsers, dependencies=[Depends(_require_demo_mode)])
def list_demo_users(db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.created_at).all()
    return DemoUsers(
        travelers=[u for u in users if u.role == Role.traveler],
        guides=[u for u in users if u.role == Role.guide],
        admins=[u for u in users if u.role == Role.admin],
    )


@router.post("/demo-login", response_model=Token, dependencies=[Depends(_require_demo_mode)])
def demo_login(body: DemoLoginRequest, db: Session = Depends(get_db)):
    """
    Log in as an existing user by id, or create a fresh demo user.
    New travelers get an empty traveler profile.
    """
    if body.user_id:
        user = db.query(User).filter(User.id == body.user_id).first()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return _build_token_response(user)

    if not body.display_name:
        raise HTTPException(status_code=400, detail="Display name required for new users")

    user = User(
        email=f"demo-{uuid.uuid4().hex[:12]}@example.com",
        role=body.role,
        display_name=body.display_name,
        avatar_url=f"https://i.pravatar.cc/150?img={random.randint(0, 69)}",
    )
    db.add(user)
    db.flush()
    if body.role == "traveler":
        db.add(TravelerProfile(uid=user.id, display_name=user.display_name, avatar_url=user.avatar_url))
    db.commit()
    db.refresh(user)
    return _build_token_response(user)


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(current_user: User = Depends(get_current_user)):
    """
    Stateless JWTs: the client discards the token.
    """
    return {"message": "Successfully logged out"}


@me_router.get("", response_model=UserSchema)
def get_me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's account."""
    return current_user
