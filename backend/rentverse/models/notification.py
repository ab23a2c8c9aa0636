from sqlalchemy import Boolean, Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from rentverse.database import Base

NOTIFICATION_TYPES = ("BOOKING_REQUEST", "BOOKING_APPROVED", "BOOKING_REJECTED", "NEW_MESSAGE")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(Text, nullable=False)

    user = relationship("User", back_populates="notifications")
