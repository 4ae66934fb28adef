"""Shared fakes for the test-suite.

`FakeDatabase` mimics `core.db.Database` over in-memory tables. It recognizes
the statements issued by the repositories by their SQL text, and rolls back
its state when a `transaction()` block raises.
"""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest

from core.tmdb import Movie, TMDBError

AUCTION_START = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
AUCTION_END = AUCTION_START + timedelta(days=7)


def _norm(sql: str) -> str:
    return " ".join(sql.split())


class FakeDatabase:
    def __init__(self):
        self.articles: dict[int, dict[str, Any]] = {}
        self.images: list[tuple[int, str]] = []
        self.movies: dict[int, str] = {}
        self.bids: list[int] = []
        self.interests: set[tuple[int, int]] = set()
        self.accounts: list[dict[str, Any]] = []
        self.buyers: list[dict[str, Any]] = []
        self.companies: list[dict[str, Any]] = []
        self.search_rows: list[dict[str, Any]] = []
        self.next_article_id = 1

        self.statements: list[tuple[str, tuple]] = []
        self.fail_on: str | None = None
        self.transactions = 0

    # -- seeding helpers --

    def add_article(self, **overrides: Any) -> dict[str, Any]:
        art_id = overrides.pop("art_id", self.next_article_id)
        self.next_article_id = max(self.next_article_id, art_id + 1)
        row = {
            "art_id": art_id,
            "art_name": f"Article {art_id}",
            "art_description": "A prop from the movie",
            "art_price": Decimal("100.00"),
            "art_min_bidding": Decimal("5.00"),
            "art_auction_start": AUCTION_START,
            "art_auction_end": AUCTION_END,
            "m_id": 603,
            "c_id": 1,
        }
        row.update(overrides)
        self.articles[art_id] = row
        return row

    def add_image(self, art_id: int, path: str) -> None:
        self.images.append((art_id, path))

    def add_account(self, acc_id: int, token: str | None, email: str | None = None) -> None:
        self.accounts.append(
            {
                "acc_id": acc_id,
                "acc_email": email or f"user{acc_id}@example.com",
                "acc_session_token": token,
            }
        )

    def add_buyer(self, b_id: int, acc_id: int, firstname: str = "Jane", lastname: str = "Doe") -> None:
        self.buyers.append({"b_id": b_id, "acc_id": acc_id, "b_firstname": firstname, "b_lastname": lastname})

    def add_company(self, c_id: int, acc_id: int, name: str = "Prop Store") -> None:
        self.companies.append({"c_id": c_id, "acc_id": acc_id, "c_name": name})

    # -- Database API --

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        rows = self._run(sql, args)
        return rows[0] if rows else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        return self._run(sql, args)

    async def execute(self, sql: str, *args: Any) -> None:
        self._run(sql, args)

    async def execute_many(self, sql: str, records) -> None:
        for record in records:
            self._run(sql, tuple(record))

    @asynccontextmanager
    async def transaction(self):
        self.transactions += 1
        snapshot = self._snapshot()
        try:
            yield self
        except BaseException:
            self._restore(snapshot)
            raise

    def _snapshot(self) -> dict[str, Any]:
        keys = ("articles", "images", "movies", "bids", "interests", "accounts", "next_article_id")
        return {k: copy.deepcopy(getattr(self, k)) for k in keys}

    def _restore(self, snapshot: dict[str, Any]) -> None:
        for key, value in snapshot.items():
            setattr(self, key, value)

    def _run(self, sql: str, args: tuple) -> list[dict[str, Any]]:
        q = _norm(sql)
        self.statements.append((q, args))
        if self.fail_on and self.fail_on in q:
            raise RuntimeError(f"statement failed: {self.fail_on}")

        if q.startswith("DELETE FROM article_image"):
            self.images = [(a, p) for (a, p) in self.images if a != args[0]]
            return []
        if q.startswith("DELETE FROM article"):
            self.articles.pop(args[0], None)
            return []
        if q.startswith("INSERT INTO article_image"):
            self.images.append((args[0], args[1]))
            return []
        if q.startswith("INSERT INTO movie"):
            self.movies.setdefault(args[0], args[1])
            return []
        if q.startswith("INSERT INTO article"):
            keys = (
                "art_name",
                "art_description",
                "art_price",
                "art_min_bidding",
                "art_auction_start",
                "art_auction_end",
                "m_id",
                "c_id",
            )
            row = self.add_article(art_id=self.next_article_id, **dict(zip(keys, args)))
            return [dict(row)]
        if "FROM article_image" in q:
            return [{"img_path": p} for (a, p) in self.images if a == args[0]]
        if "websearch_to_tsquery" in q:
            limit, offset = args[1], args[2]
            return [dict(r) for r in self.search_rows[offset : offset + limit]]
        if "FROM bid" in q:
            counts: dict[int, int] = {}
            for art_id in self.bids:
                counts[art_id] = counts.get(art_id, 0) + 1
            ordered = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
            limit, offset = args
            return [
                {**self.articles[art_id], "bid_count": n}
                for art_id, n in ordered[offset : offset + limit]
                if art_id in self.articles
            ]
        if "FROM article a WHERE a.art_id = $1" in q:
            row = self.articles.get(args[0])
            return [dict(row)] if row else []
        if "FROM article a" in q:
            return [dict(r) for r in self.articles.values()]
        if "FROM interests" in q:
            return [{"ok": 1}] if (args[0], args[1]) in self.interests else []
        if "FROM account" in q:
            return [dict(a) for a in self.accounts if a["acc_session_token"] == args[0]]
        if "FROM buyer" in q:
            return [dict(b) for b in self.buyers if b["acc_id"] == args[0]]
        if "FROM company" in q:
            return [dict(c) for c in self.companies if c["acc_id"] == args[0]]
        if q.startswith("UPDATE account SET acc_session_token = NULL"):
            for account in self.accounts:
                if account["acc_id"] == args[0]:
                    account["acc_session_token"] = None
            return []
        raise AssertionError(f"unexpected statement: {q}")


class FakeMovieProvider:
    """In-memory stand-in for the TMDB client."""

    def __init__(self, titles: dict[int, str] | None = None, posters: dict[int, str] | None = None):
        self.titles = titles if titles is not None else {603: "The Matrix"}
        self.posters = posters if posters is not None else {}
        self.poster_calls: list[tuple[int, str]] = []

    async def get_movie(self, movie_id: int) -> Movie:
        if movie_id not in self.titles:
            raise TMDBError(f"TMDB movie request failed: 404 movie {movie_id}")
        return Movie(id=movie_id, title=self.titles[movie_id])

    async def get_movie_poster_url(self, movie_id: int, size: str) -> str:
        self.poster_calls.append((movie_id, size))
        if movie_id not in self.posters:
            raise TMDBError(f"Movie {movie_id} has no poster.")
        return f"https://image.tmdb.org/t/p/{size}{self.posters[movie_id]}"


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def movies() -> FakeMovieProvider:
    return FakeMovieProvider()
