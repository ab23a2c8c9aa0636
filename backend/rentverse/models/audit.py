from sqlalchemy import Column, ForeignKey, Text
from rentverse.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Text, primary_key=True)
    admin_id = Column(Text, ForeignKey("users.id", ondelete="SET NULL"))
    action = Column(Text, nullable=False)
    module = Column(Text, nullable=False)
    target_type = Column(Text, nullable=False)
    target_id = Column(Text, nullable=False)
    details = Column(Text)
    created_at = Column(Text, nullable=False, index=True)
