from sqlalchemy import Boolean, Column, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from rentverse.database import Base


class WishlistCollection(Base):
    __tablename__ = "wishlist_collections"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    emoji = Column(Text)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(Text, nullable=False)

    items = relationship("WishlistItem", back_populates="collection", cascade="all, delete-orphan",
                         order_by="WishlistItem.added_at.desc()")


class WishlistItem(Base):
    __tablename__ = "wishlist_items"
    __table_args__ = (UniqueConstraint("collection_id", "listing_id"),)

    id = Column(Text, primary_key=True)
    collection_id = Column(Text, ForeignKey("wishlist_collections.id", ondelete="CASCADE"), nullable=False)
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True)
    added_at = Column(Text, nullable=False)

    collection = relationship("WishlistCollection", back_populates="items")
    listing = relationship("Listing")


class RecentlyViewed(Base):
    __tablename__ = "recently_viewed"
    __table_args__ = (UniqueConstraint("user_id", "listing_id"),)

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False)
    viewed_at = Column(Text, nullable=False)

    listing = relationship("Listing")


class HostFollow(Base):
    __tablename__ = "host_follows"

    follower_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    host_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(Text, nullable=False)
