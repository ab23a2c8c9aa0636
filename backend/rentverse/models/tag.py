from sqlalchemy import Column, ForeignKey, Table, Text
from sqlalchemy.orm import relationship
from rentverse.database import Base

listing_tags = Table(
    "listing_tags",
    Base.metadata,
    Column("listing_id", Text, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Text, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False, unique=True)

    listings = relationship("Listing", secondary=listing_tags, back_populates="tags")
