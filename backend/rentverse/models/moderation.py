from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from rentverse.database import Base

MODERATION_STATUSES = ("PENDING", "APPROVED", "REJECTED")
MODERATION_PRIORITIES = ("LOW", "MEDIUM", "HIGH")
MODERATION_TARGETS = ("Listing", "User")


class ModerationItem(Base):
    __tablename__ = "moderation_items"

    id = Column(Text, primary_key=True)
    target_type = Column(Text, nullable=False)
    target_id = Column(Text, nullable=False)
    reason = Column(Text, nullable=False)
    priority = Column(Text, nullable=False, default="MEDIUM")
    status = Column(Text, nullable=False, default="PENDING", index=True)
    reporter_id = Column(Text, ForeignKey("users.id", ondelete="SET NULL"))
    reviewer_id = Column(Text, ForeignKey("users.id", ondelete="SET NULL"))
    review_note = Column(Text)
    reviewed_at = Column(Text)
    created_at = Column(Text, nullable=False)

    reporter = relationship("User", foreign_keys=[reporter_id])
    reviewer = relationship("User", foreign_keys=[reviewer_id])
