"""
Article dependencies for FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Request

from core import db
from core.tmdb import TMDBClient

from .repository import ArticleStore


def get_movie_provider(request: Request) -> TMDBClient:
    # Built once per process in the lifespan (see `api/main.py`).
    return request.app.state.tmdb


def get_article_store(
    database: db.Database = Depends(db.database),
    movies: TMDBClient = Depends(get_movie_provider),
) -> ArticleStore:
    return ArticleStore(database, movies)
