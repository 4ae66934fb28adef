"""
Article API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field

from core.dates import date_diff

from .models import Article


class CreateArticleRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., max_length=5000)
    price: Decimal = Field(..., ge=0)
    min_bidding: Decimal = Field(..., ge=0)
    auction_start: datetime
    auction_end: datetime
    img_paths: list[str] = Field(default_factory=list)
    tmdb_movie_id: int = Field(..., ge=1)


class TimeLeftResponse(BaseModel):
    day: int
    hour: int
    min: int
    sec: int


class ArticleResponse(BaseModel):
    id: int | None
    name: str
    description: str
    price: Decimal
    min_bidding: Decimal
    auction_start: datetime
    auction_end: datetime
    img_paths: list[str]
    tmdb_movie_id: int | None
    selling_company_id: int | None
    is_fallback: bool
    time_left: TimeLeftResponse


class ArticleListResponse(BaseModel):
    articles: list[ArticleResponse]
    limit: int
    offset: int
    count: int


class PosterResponse(BaseModel):
    article_id: int
    poster: str


class LikedResponse(BaseModel):
    article_id: int
    liked: bool


def _aware(value: datetime) -> datetime:
    # Naive timestamps from `timestamp` columns are taken as UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def to_article_response(article: Article, *, now: datetime | None = None) -> ArticleResponse:
    now = now or datetime.now(timezone.utc)
    diff = date_diff(_aware(article.auction_end), _aware(now))
    return ArticleResponse(
        id=article.id,
        name=article.name,
        description=article.description,
        price=article.price,
        min_bidding=article.min_bidding,
        auction_start=article.auction_start,
        auction_end=article.auction_end,
        img_paths=list(article.img_paths),
        tmdb_movie_id=article.tmdb_movie_id,
        selling_company_id=article.selling_company_id,
        is_fallback=article.is_fallback,
        time_left=TimeLeftResponse(day=diff.day, hour=diff.hour, min=diff.min, sec=diff.sec),
    )
