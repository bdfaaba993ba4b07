from uuid import UUID
from typing import List
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.conversation import Conversation, Message
from app.models.reservation import Reservation
from app.schemas.conversation import (
    Conversation as ConversationSchema,
    Message as MessageSchema,
    MessageCreate,
)

router = APIRouter(prefix="/conversations", tags=["Conversations"])


def _get_conversation(db: Session, conversation_id: UUID) -> Conversation:
    conversation = db.query(Conversation).filter(Conversation.id == conversation_id).first()
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@router.get("/user/{user_id}", response_model=List[ConversationSchema])
def list_user_conversations(user_id: UUID, db: Session = Depends(get_db)):
    """Conversations the user takes part in, most recently active first."""
    return (
        db.query(Conversation)
        .join(Reservation, Reservation.id == Conversation.reservation_id)
        .filter(or_(Reservation.traveler_id == user_id, Reservation.guide_id == user_id))
        .order_by(func.coalesce(Conversation.last_message_at, Conversation.created_at).desc())
        .all()
    )


@router.get("/{conversation_id}", response_model=ConversationSchema)
def get_conversation(conversation_id: UUID, db: Session = Depends(get_db)):
    return _get_conversation(db, conversation_id)


@router.get("/{conversation_id}/messages", response_model=List[MessageSchema])
def list_messages(conversation_id: UUID, db: Session = Depends(get_db)):
    _get_conversation(db, conversation_id)
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id)
        .all()
    )


@router.post("/{conversation_id}/messages", response_model=MessageSchema)
def post_message(conversation_id: UUID, data: MessageCreate, db: Session = Depends(get_db)):
    conversation = _get_conversation(db, conversation_id)
    if str(data.sender_id) not in conversation.participant_ids:
        raise HTTPException(status_code=403, detail="Sender is not part of this conversation")

    now = datetime.now(timezone.utc)
    message = Message(
        conversation_id=conversation.id,
        sender_id=data.sender_id,
        text=data.text,
        created_at=now,
    )
    db.add(message)
    conversation.last_message_at = now
    db.commit()
    db.refresh(message)
    return message
