import re
import uuid
from sqlalchemy.orm import Session
from app.models.user import GuideProfile


def generate_slug(text: str) -> str:
    """Convert text to a URL-safe slug: lowercase, hyphens, no special chars."""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug


def make_unique_handle(db: Session, display_name: str) -> str:
    """Generate a unique guide handle, appending a short random suffix on collision."""
    base_handle = generate_slug(display_name) or "guide"
    handle = base_handle
    while db.query(GuideProfile.uid).filter(GuideProfile.handle == handle).first() is not None:
        handle = f"{base_handle}-{uuid.uuid4().hex[:6]}"
    return handle
