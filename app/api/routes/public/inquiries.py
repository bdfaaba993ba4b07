import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.inquiry import ContactSubmission, NewsletterSubscription
from app.schemas.inquiry import ContactCreate, ContactResponse, NewsletterSubscribe, NewsletterResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contact & Newsletter"])


@router.post("/contact", response_model=ContactResponse)
def submit_contact(data: ContactCreate, db: Session = Depends(get_db)):
    submission = ContactSubmission(
        name=data.name,
        email=data.email,
        subject=data.subject,
        message=data.message,
        gdpr_consent=data.gdpr_consent,
        user_id=data.user_id,
        status="new",
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info("Contact submission %s received", submission.id)
    return ContactResponse(
        success=True,
        submission_id=submission.id,
        message="Your message has been received. We'll get back to you soon!",
    )


@router.post("/newsletter/subscribe", response_model=NewsletterResponse)
def subscribe(data: NewsletterSubscribe, request: Request, db: Session = Depends(get_db)):
    """
    Double opt-in: store a pending subscription and hand out a confirmation link.
    Mail delivery is not handled here; the link is logged.
    """
    existing = db.query(NewsletterSubscription).filter(NewsletterSubscription.email == data.email).first()
    if existing:
        if existing.status == "confirmed":
            raise HTTPException(status_code=400, detail="Email already subscribed")
        return NewsletterResponse(
            success=True,
            message="Confirmation email has been sent. Please check your inbox.",
        )

    subscription = NewsletterSubscription(
        email=data.email,
        status="pending",
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)

    confirm_url = request.url_for("confirm_subscription", token=subscription.token)
    logger.info("Newsletter confirmation link for %s: %s", subscription.email, confirm_url)
    return NewsletterResponse(
        success=True,
        message="Please check your email to confirm your subscription.",
    )


@router.get("/newsletter/confirm/{token}", response_model=NewsletterResponse, name="confirm_subscription")
def confirm_subscription(token: str, db: Session = Depends(get_db)):
    subscription = db.query(NewsletterSubscription).filter(NewsletterSubscription.token == token).first()
    if not subscription:
        raise HTTPException(status_code=404, detail="This confirmation link is invalid or has expired")

    if subscription.status == "confirmed":
        return NewsletterResponse(
            success=True,
            message="Your email is already confirmed for our newsletter.",
        )

    subscription.status = "confirmed"
    subscription.confirmed_at = datetime.now(timezone.utc)
    db.commit()
    return NewsletterResponse(
        success=True,
        message="Thank you for subscribing to our newsletter.",
    )
