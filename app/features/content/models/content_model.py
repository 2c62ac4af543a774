from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from app.database.db import Base
from app.features.auth.models.user_model import utcnow


class ContentItem(Base):
    __tablename__ = "content_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    content_type = Column(String(50), nullable=False)
    content = Column(Text, nullable=False)
    prompt = Column(Text, nullable=False)
    language = Column(String(10), default="th", nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
