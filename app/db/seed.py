import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.security import get_password_hash
from app.models.user import User, GuideProfile, TravelerProfile
from app.models.city import City
from app.models.availability_slot import AvailabilitySlot
from app.models.reservation import Reservation, Booking
from app.models.conversation import Conversation, Message
from app.models.review_report import Review, Report
from app.models.inquiry import ContactSubmission, NewsletterSubscription
from app.utils.slots import slot_end

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

CITIES = [
    {"name": "Barcelona", "slug": "barcelona", "country_code": "ES", "country": "Spain",
     "timezone": "Europe/Madrid", "lat": 41.3874, "lng": 2.1686},
    {"name": "Berlin", "slug": "berlin", "country_code": "DE", "country": "Germany",
     "timezone": "Europe/Berlin", "lat": 52.52, "lng": 13.405},
    {"name": "Lisbon", "slug": "lisbon", "country_code": "PT", "country": "Portugal",
     "timezone": "Europe/Lisbon", "lat": 38.7223, "lng": -9.1393},
]

GUIDES = [
    {"email": "marta@example.com", "display_name": "Marta Vidal", "handle": "marta-vidal",
     "city_slug": "barcelona", "languages": ["English", "Spanish", "Catalan"],
     "themes": ["Nightlife", "History"], "base_rate_hour": 35,
     "prices": {"h4": 140, "h6": 200, "h8": 250, "currency": "EUR"}},
    {"email": "jonas@example.com", "display_name": "Jonas Weber", "handle": "jonas-weber",
     "city_slug": "berlin", "languages": ["English", "German"],
     "themes": ["Art", "Queer History"], "base_rate_hour": None,
     "prices": {"h4": 120, "h6": 170, "h8": 220, "currency": "EUR"}},
    {"email": "ines@example.com", "display_name": "Inês Costa", "handle": "ines-costa",
     "city_slug": "lisbon", "languages": ["English", "Portuguese"],
     "themes": ["Food", "Architecture"], "base_rate_hour": 30,
     "prices": {"h4": 120, "h6": 170, "h8": 215, "currency": "USD"}},
]

TRAVELERS = [
    {"email": "alex@example.com", "display_name": "Alex Morgan", "home_country": "US"},
    {"email": "sam@example.com", "display_name": "Sam Lee", "home_country": "CA"},
]

# Child tables first so foreign keys are respected
RESET_ORDER = [
    Message, Conversation, Review, Report, Booking, Reservation, AvailabilitySlot,
    GuideProfile, TravelerProfile, ContactSubmission, NewsletterSubscription, User, City,
]


def reset_database(db: Session) -> None:
    for model in RESET_ORDER:
        db.query(model).delete(synchronize_session=False)
    db.commit()


def seed_database(db: Session) -> None:
    """Insert demo cities, users, profiles and upcoming slots. Safe to run twice."""
    if db.query(User).filter(User.email == "admin@example.com").first():
        logger.info("Seed data already present, skipping")
        return

    password_hash = get_password_hash(DEMO_PASSWORD)
    cities = {}
    for data in CITIES:
        city = City(**data)
        db.add(city)
        cities[data["slug"]] = city

    db.add(User(email="admin@example.com", password_hash=password_hash, role="admin",
                display_name="Admin", verified=True))

    for data in TRAVELERS:
        user = User(email=data["email"], password_hash=password_hash, role="traveler",
                    display_name=data["display_name"])
        db.add(user)
        db.flush()
        db.add(TravelerProfile(uid=user.id, display_name=user.display_name,
                               home_country=data["home_country"]))

    # Slots start on whole hours from tomorrow, one 4h morning and one 8h day each
    tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).replace(
        hour=9, minute=0, second=0, microsecond=0
    )
    for data in GUIDES:
        city = cities[data["city_slug"]]
        user = User(email=data["email"], password_hash=password_hash, role="guide",
                    display_name=data["display_name"], verified=True)
        db.add(user)
        db.flush()
        db.add(GuideProfile(
            uid=user.id,
            handle=data["handle"],
            display_name=data["display_name"],
            city=city.name,
            city_slug=city.slug,
            country=city.country,
            timezone=city.timezone,
            bio=f"Local guide in {city.name}.",
            languages=data["languages"],
            themes=data["themes"],
            photos=[],
            prices=data["prices"],
            base_rate_hour=data["base_rate_hour"],
            max_group_size=6,
            rating_avg=0,
            rating_count=0,
            verified=True,
        ))
        db.flush()
        for day, duration in ((0, 4), (1, 8)):
            start = tomorrow + timedelta(days=day)
            db.add(AvailabilitySlot(
                guide_id=user.id,
                start_time=start,
                end_time=slot_end(start, duration),
                duration_hours=duration,
                status="open",
            ))

    db.commit()
    logger.info("Seeded %d cities, %d guides, %d travelers", len(CITIES), len(GUIDES), len(TRAVELERS))
