
from app.schemas.common import PaginatedResponse, ErrorResponse, MessageResponse
from app.schemas.user import (
    User, UserCreate, AdminCreate, UserSummary, UserAdminUpdate, Token,
    DemoLoginRequest, DemoUsers,
    GuideProfile, GuideProfileUpdate, TravelerProfile, TravelerProfileUpdate,
)
from app.schemas.city import City, CityCreate, CityUpdate, CityDetail
from app.schemas.availability import Slot, SlotCreate, SlotUpdate
from app.schemas.reservation import (
    Reservation, ReservationCreate, ReservationCreateResponse, ReservationStatusUpdate,
    Booking, Quote,
)
from app.schemas.conversation import Conversation, Message, MessageCreate
from app.schemas.review_report import (
    Review, ReviewCreate, ReviewUpdate, ReviewStatusUpdate,
    Report, ReportCreate, ReportResolve,
)
from app.schemas.inquiry import ContactCreate, ContactResponse, NewsletterSubscribe, NewsletterResponse
