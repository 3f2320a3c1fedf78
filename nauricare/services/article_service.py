from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import Optional, List

from ..models.article import Article

RELATED_ARTICLE_LIMIT = 3

def split_paragraphs(content: str) -> List[str]:
    return [block.strip() for block in content.split("\n\n") if block.strip()]

class ArticleService:
    def __init__(self, db: Session):
        self.db = db

    def list_published(self, category: Optional[str] = None, language: Optional[str] = None) -> List[Article]:
        query = self.db.query(Article).filter(Article.published == True)

        if category:
            query = query.filter(Article.category == category)
        if language:
            query = query.filter(Article.language == language)

        return query.order_by(Article.created_at.asc(), Article.title.asc()).all()

    def get_by_slug(self, slug: str) -> Article:
        article = self.db.query(Article).filter(
            Article.slug == slug,
            Article.published == True
        ).first()

        if not article:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Article not found"
            )
        return article

    def related(self, article: Article, limit: int = RELATED_ARTICLE_LIMIT) -> List[Article]:
        """Other published articles, same category first."""
        others = [a for a in self.list_published() if a.id != article.id]
        same_category = [a for a in others if a.category == article.category]
        rest = [a for a in others if a.category != article.category]
        return (same_category + rest)[:limit]
