from app.db.session import Base
from app.models.user import User, GuideProfile, TravelerProfile
from app.models.city import City
from app.models.availability_slot import AvailabilitySlot
from app.models.reservation import Reservation, Booking
from app.models.conversation import Conversation, Message
from app.models.review_report import Review, Report
from app.models.inquiry import ContactSubmission, NewsletterSubscription
