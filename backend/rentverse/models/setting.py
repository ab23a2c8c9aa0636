from sqlalchemy import Column, Text
from rentverse.database import Base


class PlatformSetting(Base):
    __tablename__ = "platform_settings"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
