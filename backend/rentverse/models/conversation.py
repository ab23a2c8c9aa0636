from sqlalchemy import Boolean, Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from rentverse.database import Base


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(Text, primary_key=True)
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="SET NULL"))
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    listing = relationship("Listing")
    participants = relationship("ConversationParticipant", back_populates="conversation",
                                cascade="all, delete-orphan")
    messages = relationship("ConversationMessage", back_populates="conversation",
                            cascade="all, delete-orphan", order_by="ConversationMessage.created_at")


class ConversationParticipant(Base):
    __tablename__ = "conversation_participants"

    conversation_id = Column(Text, ForeignKey("conversations.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)

    conversation = relationship("Conversation", back_populates="participants")
    user = relationship("User")


class ConversationMessage(Base):
    __tablename__ = "conversation_messages"

    id = Column(Text, primary_key=True)
    conversation_id = Column(Text, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(Text, nullable=False)

    conversation = relationship("Conversation", back_populates="messages")
    sender = relationship("User")
