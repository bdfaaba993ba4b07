
from fastapi import APIRouter

# Auth
from app.api.routes.public.auth import router as auth_router, me_router

# Public — discovery
from app.api.routes.public.cities import router as cities_router
from app.api.routes.public.guides import router as guides_router
from app.api.routes.public.travelers import router as travelers_router

# Public — slots, reservations, bookings
from app.api.routes.public.availability import (
    guide_slots_router,
    router as availability_router,
)
from app.api.routes.public.reservations import router as reservations_router, bookings_router

# Public — messaging, reviews, moderation reports
from app.api.routes.public.conversations import router as conversations_router
from app.api.routes.public.reviews import router as reviews_router
from app.api.routes.public.reports import router as reports_router

# Public — contact form, newsletter, health, dev tools
from app.api.routes.public.inquiries import router as inquiries_router
from app.api.routes.public.health import router as health_router
from app.api.routes.public.dev import router as dev_router

# Admin
from app.api.routes.admin.users import router as admin_users_router, guides_router as admin_guides_router
from app.api.routes.admin.bookings import router as admin_bookings_router
from app.api.routes.admin.moderation import reviews_router as admin_reviews_router, reports_router as admin_reports_router
from app.api.routes.admin.cities import router as admin_cities_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)
api_router.include_router(me_router)

# --- Public: discovery ---
api_router.include_router(cities_router)
api_router.include_router(guide_slots_router)
api_router.include_router(guides_router)
api_router.include_router(travelers_router)

# --- Public: slots & reservations ---
api_router.include_router(availability_router)
api_router.include_router(reservations_router)
api_router.include_router(bookings_router)

# --- Public: conversations, reviews, reports ---
api_router.include_router(conversations_router)
api_router.include_router(reviews_router)
api_router.include_router(reports_router)

# --- Public: contact, newsletter, system ---
api_router.include_router(inquiries_router)
api_router.include_router(health_router)
api_router.include_router(dev_router)

# --- Admin ---
api_router.include_router(admin_users_router)
api_router.include_router(admin_guides_router)
api_router.include_router(admin_bookings_router)
api_router.include_router(admin_reviews_router)
api_router.include_router(admin_reports_router)
api_router.include_router(admin_cities_router)
