import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from articles import router as articles_router
from auth import router as auth_router
from core import db
from core.log import setup_logging
from core.tmdb import TMDBClient

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Initialize the DB pool and the TMDB client once per process.
    await db.init_pool()
    app.state.tmdb = TMDBClient.from_env()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Session cookies are sent cross-origin by the frontend dev server.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(articles_router.router, tags=["articles"])
app.include_router(auth_router.router, tags=["auth"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "movie-auction api"}
