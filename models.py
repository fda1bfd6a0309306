import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime
from database import Base


class Image(Base):
    __tablename__ = "images"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(Text, nullable=False)
    image_path = Column(String(512), nullable=False)
    created_at = Column(DateTime, nullable=False, index=True, default=lambda: datetime.now(timezone.utc))
