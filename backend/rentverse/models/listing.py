from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Numeric, Text
from sqlalchemy.orm import relationship
from rentverse.database import Base

LISTING_STATUSES = ("ACTIVE", "DRAFT", "ARCHIVED", "BLOCKED")
PRICE_UNITS = ("HOUR", "DAY", "WEEK", "MONTH")


class Listing(Base):
    __tablename__ = "listings"

    id = Column(Text, primary_key=True)
    owner_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(Text, nullable=False)
    price = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    price_unit = Column(Text, nullable=False, default="DAY")
    location = Column(Text)
    status = Column(Text, nullable=False, default="ACTIVE")
    available = Column(Boolean, nullable=False, default=True)
    rating = Column(Float, nullable=False, default=0.0)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    owner = relationship("User", back_populates="listings")
    tags = relationship("Tag", secondary="listing_tags", back_populates="listings")
    bookings = relationship("Booking", back_populates="listing", cascade="all, delete-orphan")


Index("idx_listings_status", Listing.status)
Index("idx_listings_category", Listing.category)
Index("idx_listings_price", Listing.price)
