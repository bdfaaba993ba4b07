from typing import Optional, List
from pydantic import BaseModel, UUID4, Field
from datetime import datetime


class Conversation(BaseModel):
    id: UUID4
    reservation_id: UUID4
    participant_ids: List[str]
    created_at: Optional[datetime] = None
    last_message_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    sender_id: UUID4
    text: str = Field(min_length=1)


class Message(BaseModel):
    id: UUID4
    conversation_id: UUID4
    sender_id: UUID4
    text: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
