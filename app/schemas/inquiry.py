from typing import Optional, Literal
from pydantic import BaseModel, EmailStr, UUID4, Field


# POST /contact
class ContactCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=10, max_length=2000)
    gdpr_consent: Literal[True]
    user_id: Optional[UUID4] = None


class ContactResponse(BaseModel):
    success: bool
    submission_id: UUID4
    message: str


# POST /newsletter/subscribe
class NewsletterSubscribe(BaseModel):
    email: EmailStr
    gdpr_consent: Literal[True]


class NewsletterResponse(BaseModel):
    success: bool
    message: str
