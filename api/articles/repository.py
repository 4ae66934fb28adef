"""
Article persistence (raw SQL).

Tables:
- article (art_id, art_name, art_description, art_price, art_min_bidding,
  art_auction_start, art_auction_end, m_id, c_id)
- article_image (art_id, img_path)
- movie (m_id, m_title)
- bid (art_id, ...)
- interests (art_id, b_id)

Search relies on Postgres full-text search (websearch_to_tsquery / ts_rank)
and on the pg_trgm extension (similarity).
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence

from auth.models import Buyer
from core.db import Database
from core.errors import UnexpectedStateError
from core.tmdb import TMDBClient

from .models import PLACEHOLDER_IMAGE, Article, article_from_row, fallback_article

SEARCH_ALL = "@all"
SIMILARITY_THRESHOLD = 0.08
POSTER_SIZE = "w342"

DEFAULT_SEARCH_LIMIT = 20
DEFAULT_MOST_BIDS_LIMIT = 8

ARTICLE_COLUMNS = """
    a.art_id, a.art_name, a.art_description, a.art_price, a.art_min_bidding,
    a.art_auction_start, a.art_auction_end, a.m_id, a.c_id
"""

logger = logging.getLogger(__name__)


class ArticleNotFoundError(RuntimeError):
    def __init__(self, article_id: int):
        super().__init__(f"Article {article_id} does not exist.")
        self.article_id = article_id


class ArticleStore:
    """
    Data access for auction articles.

    `db` is the storage handle and `movies` the movie-metadata provider
    (TMDB), both injected.
    """

    def __init__(self, db: Database, movies: TMDBClient):
        self._db = db
        self._movies = movies

    async def _images(self, article_id: int) -> list[str]:
        rows = await self._db.fetch_all(
            """
            SELECT img_path
            FROM article_image
            WHERE art_id = $1
            """,
            article_id,
        )
        return [str(r["img_path"]) for r in rows]

    async def _from_row(self, row: dict[str, Any]) -> Article:
        """
        Map one `article` row to an Article, images included.
        """
        images = await self._images(int(row["art_id"]))
        return article_from_row(row, images)

    async def _from_rows(self, rows: Sequence[dict[str, Any]]) -> list[Article]:
        # One image query per article; fine at marketplace scale.
        return [await self._from_row(row) for row in rows]

    async def get(self, article_id: int) -> Article:
        """
        Raises ArticleNotFoundError when no article has this id.
        """
        row = await self._db.fetch_one(
            f"""
            SELECT {ARTICLE_COLUMNS}
            FROM article a
            WHERE a.art_id = $1
            """,
            article_id,
        )
        if row is None:
            raise ArticleNotFoundError(article_id)
        return await self._from_row(row)

    async def create(
        self,
        *,
        name: str,
        description: str,
        price: Decimal,
        min_bidding: Decimal,
        auction_start: datetime,
        auction_end: datetime,
        img_paths: Sequence[str],
        tmdb_movie_id: int,
        selling_company_id: int,
    ) -> Article:
        """
        Insert an article, its images and (if missing) its movie in a single
        transaction.

        The movie title is fetched from TMDB first; a TMDB failure propagates
        and nothing is written.
        """
        movie = await self._movies.get_movie(tmdb_movie_id)

        async with self._db.transaction() as tx:
            await tx.execute(
                """
                INSERT INTO movie (m_id, m_title)
                VALUES ($1, $2)
                ON CONFLICT DO NOTHING
                """,
                tmdb_movie_id,
                movie.title,
            )

            row = await tx.fetch_one(
                """
                INSERT INTO article (
                    art_name, art_description, art_price, art_min_bidding,
                    art_auction_start, art_auction_end, m_id, c_id
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                RETURNING *
                """,
                name,
                description,
                price,
                min_bidding,
                auction_start,
                auction_end,
                tmdb_movie_id,
                selling_company_id,
            )
            if row is None or "art_id" not in row:
                raise UnexpectedStateError("article insert returned no row")

            article_id = int(row["art_id"])
            if img_paths:
                await tx.execute_many(
                    "INSERT INTO article_image (art_id, img_path) VALUES ($1, $2)",
                    [(article_id, path) for path in img_paths],
                )

        logger.info(
            "article_created article_id=%s movie_id=%s company_id=%s images=%s",
            article_id,
            tmdb_movie_id,
            selling_company_id,
            len(img_paths),
        )
        return await self._from_row(row)

    async def get_all(self) -> list[Article]:
        rows = await self._db.fetch_all(
            f"""
            SELECT {ARTICLE_COLUMNS}
            FROM article a
            """
        )
        return await self._from_rows(rows)

    async def get_by_search(
        self,
        search: str,
        *,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
    ) -> list[Article]:
        """
        Ranked search over article name, description and movie title.

        Uses websearch syntax (quotes, -, OR, ...). Rows that do not match the
        query are still returned when their trigram similarity is high enough.
        `"@all"` returns every article and ignores pagination.
        """
        if search == SEARCH_ALL:
            return await self.get_all()

        t0 = time.perf_counter()
        rows = await self._db.fetch_all(
            f"""
            WITH q AS (
              SELECT websearch_to_tsquery($1::text) AS tsq
            ),
            ranked AS (
              SELECT
                {ARTICLE_COLUMNS},
                NULLIF(ts_rank(to_tsvector(a.art_name), (SELECT tsq FROM q)), 0) AS rank_name,
                NULLIF(ts_rank(to_tsvector(a.art_description), (SELECT tsq FROM q)), 0) AS rank_description,
                NULLIF(ts_rank(to_tsvector(m.m_title), (SELECT tsq FROM q)), 0) AS rank_movie_title,
                similarity($1::text, a.art_name || a.art_description) AS similarity,
                to_tsvector(a.art_name || ' ' || a.art_description || ' ' || m.m_title)
                  @@ (SELECT tsq FROM q) AS matched
              FROM article a
              JOIN movie m ON m.m_id = a.m_id
            )
            SELECT *
            FROM ranked
            WHERE matched OR similarity > $4
            ORDER BY
              rank_name DESC NULLS LAST,
              rank_description DESC NULLS LAST,
              rank_movie_title DESC NULLS LAST,
              similarity DESC NULLS LAST
            LIMIT $2
            OFFSET $3
            """,
            search,
            limit,
            offset or 0,
            SIMILARITY_THRESHOLD,
        )
        articles = await self._from_rows(rows)
        logger.info(
            "article_search query=%r results=%s took_ms=%.1f",
            search,
            len(articles),
            (time.perf_counter() - t0) * 1000,
        )
        return articles

    async def most_bids(
        self,
        *,
        limit: int = DEFAULT_MOST_BIDS_LIMIT,
        offset: int = 0,
    ) -> list[Article]:
        """
        Articles with the most bids first.
        """
        rows = await self._db.fetch_all(
            f"""
            SELECT {ARTICLE_COLUMNS}, counts.bid_count
            FROM article a
            JOIN (
              SELECT art_id, count(*) AS bid_count
              FROM bid
              GROUP BY art_id
            ) counts ON counts.art_id = a.art_id
            ORDER BY counts.bid_count DESC, a.art_id ASC
            LIMIT $1
            OFFSET $2
            """,
            limit or DEFAULT_MOST_BIDS_LIMIT,
            offset or 0,
        )
        return await self._from_rows(rows)

    async def is_liked_by(self, article: Article, buyer: Buyer) -> bool:
        if article.is_fallback:
            return False
        row = await self._db.fetch_one(
            """
            SELECT 1 AS ok
            FROM interests
            WHERE art_id = $1
              AND b_id = $2
            LIMIT 1
            """,
            article.id,
            buyer.id,
        )
        return row is not None

    async def delete(self, article: Article) -> None:
        """
        Remove the article and its images.
        """
        if article.is_fallback:
            raise UnexpectedStateError("cannot delete a fallback article")

        async with self._db.transaction() as tx:
            await tx.execute("DELETE FROM article_image WHERE art_id = $1", article.id)
            await tx.execute("DELETE FROM article WHERE art_id = $1", article.id)
        logger.info("article_deleted article_id=%s", article.id)

    @staticmethod
    def get_fallback(article_id: int) -> Article:
        return fallback_article(article_id)

    async def get_poster(self, article: Article) -> str:
        """
        Main image of the article. Without images, the movie poster from TMDB;
        if that fails for any reason, the placeholder image.
        """
        if article.img_paths:
            return article.img_paths[0]
        if article.tmdb_movie_id is None:
            return PLACEHOLDER_IMAGE

        try:
            return await self._movies.get_movie_poster_url(article.tmdb_movie_id, POSTER_SIZE)
        except Exception as exc:
            logger.warning(
                "poster_fallback article_id=%s movie_id=%s error=%s",
                article.id,
                article.tmdb_movie_id,
                exc,
            )
            return PLACEHOLDER_IMAGE
