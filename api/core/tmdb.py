"""
TMDB (The Movie Database) HTTP client helpers.

Used endpoints (API v3):
- GET /movie/{id}  -> {"id": ..., "title": "...", "poster_path": "/abc.jpg", ...}

Poster images are served from the image CDN:
    {TMDB_IMAGE_BASE_URL}/{size}{poster_path}   e.g. .../t/p/w342/abc.jpg
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
DEFAULT_LANGUAGE = "fr-FR"

logger = logging.getLogger(__name__)


# TMDB failures are explicit and separable from other runtime errors.
class TMDBError(RuntimeError):
    pass


@dataclass(frozen=True)
class Movie:
    id: int
    title: str
    poster_path: str | None = None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def tmdb_api_key() -> str:
    return os.environ.get("TMDB_API_KEY", "").strip()


def tmdb_base_url() -> str:
    return os.environ.get("TMDB_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL


def tmdb_image_base_url() -> str:
    return os.environ.get("TMDB_IMAGE_BASE_URL", DEFAULT_IMAGE_BASE_URL).strip() or DEFAULT_IMAGE_BASE_URL


def tmdb_language() -> str:
    return os.environ.get("TMDB_LANGUAGE", DEFAULT_LANGUAGE).strip() or DEFAULT_LANGUAGE


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise TMDBError("TMDB base url is empty.")
    return base_url.rstrip("/")


class TMDBClient:
    """
    Movie-metadata provider backed by the TMDB v3 API.

    `transport` lets tests plug an `httpx.MockTransport`.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
        language: str = DEFAULT_LANGUAGE,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = _normalize_base_url(base_url)
        self.image_base_url = _normalize_base_url(image_base_url)
        self.language = language
        self.timeout_s = timeout_s
        self._transport = transport

    @classmethod
    def from_env(cls) -> TMDBClient:
        return cls(
            api_key=tmdb_api_key(),
            base_url=tmdb_base_url(),
            image_base_url=tmdb_image_base_url(),
            language=tmdb_language(),
            timeout_s=_env_float("TMDB_TIMEOUT_S", 10.0),
        )

    async def _get_movie_payload(self, movie_id: int) -> dict[str, Any]:
        if not self.api_key:
            raise TMDBError("TMDB_API_KEY is not set.")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_s,
                transport=self._transport,
            ) as client:
                resp = await client.get(
                    f"/movie/{int(movie_id)}",
                    params={"api_key": self.api_key, "language": self.language},
                )
        except httpx.HTTPError as exc:
            logger.warning("tmdb_request_failed movie_id=%s error=%s", movie_id, exc)
            raise TMDBError(f"TMDB request failed: {exc}") from exc

        if resp.status_code != 200:
            # Avoid dumping huge bodies; include a small snippet.
            body = resp.text[:300]
            raise TMDBError(f"TMDB movie request failed: {resp.status_code} {body}")

        data = resp.json()
        if not isinstance(data, dict):
            raise TMDBError("TMDB returned a non-object movie payload.")
        return data

    async def get_movie(self, movie_id: int) -> Movie:
        """
        Fetch the metadata of one movie. Raises `TMDBError` on any failure.
        """
        data = await self._get_movie_payload(movie_id)
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise TMDBError(f"TMDB returned no title for movie {movie_id}.")

        poster_path = data.get("poster_path")
        return Movie(
            id=int(data.get("id") or movie_id),
            title=title.strip(),
            poster_path=poster_path if isinstance(poster_path, str) and poster_path else None,
        )

    async def get_movie_poster_url(self, movie_id: int, size: str) -> str:
        """
        Absolute poster URL for `movie_id` at the given size token ("w342", "original", ...).
        """
        movie = await self.get_movie(movie_id)
        if movie.poster_path is None:
            raise TMDBError(f"Movie {movie_id} has no poster.")
        return f"{self.image_base_url}/{size}{movie.poster_path}"
