from sqlalchemy import Boolean, Column, Text
from sqlalchemy.orm import relationship
from rentverse.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text)
    phone = Column(Text)
    city = Column(Text)
    avatar = Column(Text)
    bio = Column(Text)
    verified = Column(Boolean, nullable=False, default=False)
    role = Column(Text, nullable=False, default="USER")
    banned = Column(Boolean, nullable=False, default=False)
    ban_reason = Column(Text)
    created_at = Column(Text, nullable=False)

    listings = relationship("Listing", back_populates="owner")
    bookings = relationship("Booking", back_populates="renter")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
