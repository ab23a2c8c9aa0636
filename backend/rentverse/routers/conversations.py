import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from rentverse.database import get_db, utcnow
from rentverse.dependencies import require_user
from rentverse.models.conversation import Conversation, ConversationMessage, ConversationParticipant
from rentverse.models.listing import Listing
from rentverse.models.user import User
from rentverse.schemas.conversation import (
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
    ParticipantSummary,
)
from rentverse.services.notification_service import add_notification, notification_to_response, preview
from rentverse.services.realtime_service import RealtimePublisher, get_publisher, notify_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


def _message_to_response(m: ConversationMessage) -> MessageResponse:
    return MessageResponse(
        id=m.id,
        conversation_id=m.conversation_id,
        sender_id=m.sender_id,
        sender_name=m.sender.first_name if m.sender else "User",
        text=m.text,
        read=bool(m.read),
        created_at=m.created_at,
    )


def _conversation_to_response(conv: Conversation, user_id: str, db: Session) -> ConversationResponse:
    unread = (
        db.query(func.count(ConversationMessage.id))
        .filter(
            ConversationMessage.conversation_id == conv.id,
            ConversationMessage.sender_id != user_id,
            ConversationMessage.read.is_(False),
        )
        .scalar()
    )
    last = conv.messages[-1] if conv.messages else None
    return ConversationResponse(
        id=conv.id,
        listing_id=conv.listing_id,
        listing_title=conv.listing.title if conv.listing else None,
        participants=[
            ParticipantSummary(
                id=p.user.id,
                first_name=p.user.first_name,
                last_name=p.user.last_name,
                avatar=p.user.avatar,
            )
            for p in conv.participants
        ],
        last_message=_message_to_response(last) if last else None,
        unread_count=unread,
        created_at=conv.created_at,
        updated_at=conv.updated_at,
    )


def _require_participant(db: Session, conversation_id: str, user_id: str) -> Conversation:
    conv = db.get(Conversation, conversation_id)
    if not conv:
        raise HTTPException(status_code=404, detail="Conversation not found")
    if not any(p.user_id == user_id for p in conv.participants):
        raise HTTPException(status_code=403, detail="Not a participant")
    return conv


def _conversation_ids(user_id: str):
    return select(ConversationParticipant.conversation_id).where(ConversationParticipant.user_id == user_id)


async def _deliver_message(publisher: RealtimePublisher, receiver_ids: list[str],
                           message: ConversationMessage, notifications: dict) -> None:
    payload = _message_to_response(message).model_dump()
    for receiver_id in receiver_ids:
        await notify_user(publisher, receiver_id, "message",
                          {"conversation_id": message.conversation_id, "message": payload})
        notification = notifications.get(receiver_id)
        if notification is not None:
            await notify_user(publisher, receiver_id, "notification",
                              notification_to_response(notification).model_dump())


def _add_message(db: Session, conv: Conversation, sender: User, text: str,
                 receiver_ids: list[str]) -> tuple[ConversationMessage, dict]:
    now = utcnow()
    message = ConversationMessage(
        id=str(uuid.uuid4()),
        conversation_id=conv.id,
        sender_id=sender.id,
        text=text,
        read=False,
        created_at=now,
    )
    db.add(message)
    conv.updated_at = now
    notifications = {
        receiver_id: add_notification(
            db,
            user_id=receiver_id,
            type="NEW_MESSAGE",
            title=f"New Message from {sender.first_name}",
            message=preview(text),
        )
        for receiver_id in receiver_ids
    }
    return message, notifications


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(user: User = Depends(require_user), db: Session = Depends(get_db)):
    conversations = (
        db.query(Conversation)
        .options(selectinload(Conversation.participants), selectinload(Conversation.messages))
        .filter(Conversation.id.in_(_conversation_ids(user.id)))
        .order_by(Conversation.updated_at.desc())
        .all()
    )

    # One thread per counterpart; the most recently updated one wins
    by_counterpart: dict[str, Conversation] = {}
    for conv in conversations:
        other = next((p.user_id for p in conv.participants if p.user_id != user.id), None)
        if other and other not in by_counterpart:
            by_counterpart[other] = conv
    return [_conversation_to_response(c, user.id, db) for c in by_counterpart.values()]


@router.post("", response_model=ConversationResponse)
async def start_conversation(
    req: ConversationCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    publisher: RealtimePublisher = Depends(get_publisher),
):
    if not req.receiver_id:
        raise HTTPException(status_code=400, detail="receiver_id is required")
    if req.receiver_id == user.id:
        raise HTTPException(status_code=400, detail="Cannot message yourself")
    receiver = db.get(User, req.receiver_id)
    if not receiver:
        raise HTTPException(status_code=404, detail="Receiver not found")
    if req.listing_id and not db.get(Listing, req.listing_id):
        raise HTTPException(status_code=404, detail="Listing not found")

    conv = (
        db.query(Conversation)
        .filter(
            Conversation.id.in_(_conversation_ids(user.id)),
            Conversation.id.in_(_conversation_ids(receiver.id)),
        )
        .order_by(Conversation.updated_at.desc())
        .first()
    )
    now = utcnow()
    if conv:
        conv.updated_at = now
        if req.listing_id and conv.listing_id != req.listing_id:
            conv.listing_id = req.listing_id
    else:
        conv = Conversation(id=str(uuid.uuid4()), listing_id=req.listing_id, created_at=now, updated_at=now)
        conv.participants = [
            ConversationParticipant(user_id=user.id),
            ConversationParticipant(user_id=receiver.id),
        ]
        db.add(conv)

    message, notifications = None, {}
    if req.message:
        message, notifications = _add_message(db, conv, user, req.message, [receiver.id])
    db.commit()
    db.refresh(conv)

    if message is not None:
        await _deliver_message(publisher, [receiver.id], message, notifications)
    return _conversation_to_response(conv, user.id, db)


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(conversation_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    conv = _require_participant(db, conversation_id, user.id)
    messages = [_message_to_response(m) for m in conv.messages]

    db.query(ConversationMessage).filter(
        ConversationMessage.conversation_id == conv.id,
        ConversationMessage.sender_id != user.id,
        ConversationMessage.read.is_(False),
    ).update({ConversationMessage.read: True}, synchronize_session=False)
    db.commit()
    return messages


@router.post("/{conversation_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    conversation_id: str,
    req: MessageCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    publisher: RealtimePublisher = Depends(get_publisher),
):
    if not req.text or not req.text.strip():
        raise HTTPException(status_code=400, detail="Message text is required")
    conv = _require_participant(db, conversation_id, user.id)

    receiver_ids = [p.user_id for p in conv.participants if p.user_id != user.id]
    message, notifications = _add_message(db, conv, user, req.text, receiver_ids)
    db.commit()
    db.refresh(message)

    await _deliver_message(publisher, receiver_ids, message, notifications)
    return _message_to_response(message)
