from pydantic import BaseModel
from typing import Optional, List

class ArticleSummary(BaseModel):
    slug: str
    title: str
    category: str
    summary: Optional[str] = None
    read_time: Optional[str] = None
    language: Optional[str] = None

    class Config:
        from_attributes = True

class ArticleResponse(ArticleSummary):
    content: str
    paragraphs: List[str] = []
    related: List[ArticleSummary] = []
