"""
Article value type.

Two variants share the same shape:
- persisted articles, built from an `article` row (see `article_from_row`),
- fallback articles, placeholders for a missing reference (see `fallback_article`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict

PLACEHOLDER_IMAGE = "/img/article/placeholder.jpg"


class ArticleRow(BaseModel):
    """
    Typed projection of one `article` row. Extra columns (search ranks, bid
    counts, ...) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    art_id: int
    art_name: str
    art_description: str
    art_price: Decimal
    art_min_bidding: Decimal
    art_auction_start: datetime
    art_auction_end: datetime
    m_id: int | None
    c_id: int | None


@dataclass(frozen=True)
class Article:
    id: int | None
    name: str
    description: str
    price: Decimal
    min_bidding: Decimal
    auction_start: datetime
    auction_end: datetime
    img_paths: tuple[str, ...]
    tmdb_movie_id: int | None
    selling_company_id: int | None

    @property
    def is_fallback(self) -> bool:
        return self.id is None


def article_from_row(row: dict[str, Any], img_paths: Iterable[str]) -> Article:
    parsed = ArticleRow.model_validate(row)
    return Article(
        id=parsed.art_id,
        name=parsed.art_name,
        description=parsed.art_description,
        price=parsed.art_price,
        min_bidding=parsed.art_min_bidding,
        auction_start=parsed.art_auction_start,
        auction_end=parsed.art_auction_end,
        img_paths=tuple(img_paths),
        tmdb_movie_id=parsed.m_id,
        selling_company_id=parsed.c_id,
    )


def fallback_article(article_id: int) -> Article:
    """
    Article standing in for `article_id` when it cannot be found. Never stored.
    """
    now = datetime.now(timezone.utc)
    return Article(
        id=None,
        name=f"Article {article_id} not found",
        description="This article does not exist or no longer exists",
        price=Decimal(0),
        min_bidding=Decimal(0),
        auction_start=now,
        auction_end=now,
        img_paths=(PLACEHOLDER_IMAGE,),
        tmdb_movie_id=None,
        selling_company_id=None,
    )
