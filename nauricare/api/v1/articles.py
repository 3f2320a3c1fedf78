from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...services.article_service import ArticleService, split_paragraphs
from ...schemas.article import ArticleSummary, ArticleResponse

router = APIRouter(prefix="/articles", tags=["Learning Center"])

@router.get("", response_model=List[ArticleSummary])
async def list_articles(
    category: Optional[str] = Query(None),
    language: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    return ArticleService(db).list_published(category=category, language=language)

@router.get("/{slug}", response_model=ArticleResponse)
async def get_article(slug: str, db: Session = Depends(get_db)):
    service = ArticleService(db)
    article = service.get_by_slug(slug)
    summary = ArticleSummary.from_orm(article)
    return ArticleResponse(
        **summary.model_dump(),
        content=article.content,
        paragraphs=split_paragraphs(article.content),
        related=[ArticleSummary.from_orm(a) for a in service.related(article)]
    )
