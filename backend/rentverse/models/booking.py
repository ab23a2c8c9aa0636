from sqlalchemy import Column, ForeignKey, Numeric, Text
from sqlalchemy.orm import relationship
from rentverse.database import Base

BOOKING_STATUSES = ("PENDING", "CONFIRMED", "CANCELLED")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Text, primary_key=True)
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True)
    renter_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Text, nullable=False)
    end_date = Column(Text, nullable=False)
    total_price = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    status = Column(Text, nullable=False, default="PENDING")
    owner_note = Column(Text)
    created_at = Column(Text, nullable=False)

    listing = relationship("Listing", back_populates="bookings")
    renter = relationship("User", back_populates="bookings")
