from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.sql import func

from ..core.database import Base, generate_uuid

class Article(Base):
    __tablename__ = "articles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    slug = Column(String(200), unique=True, index=True, nullable=False)

    title = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    summary = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    language = Column(String(20), default="en")
    read_time = Column(String(50), nullable=True)
    published = Column(Boolean, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Article(slug='{self.slug}', title='{self.title}')>"
