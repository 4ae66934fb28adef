"""
Article API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from auth import dependencies as auth_dependencies
from auth.models import Buyer, Company
from core.tmdb import TMDBError

from . import schemas
from .dependencies import get_article_store
from .models import Article
from .repository import SEARCH_ALL, ArticleNotFoundError, ArticleStore

router = APIRouter()


async def _get_or_404(store: ArticleStore, article_id: int) -> Article:
    try:
        return await store.get(article_id)
    except ArticleNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/articles", response_model=schemas.ArticleListResponse)
async def search_articles(
    q: str = Query(default=SEARCH_ALL, min_length=1, max_length=500),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    store: ArticleStore = Depends(get_article_store),
) -> schemas.ArticleListResponse:
    articles = await store.get_by_search(q, limit=limit, offset=offset)
    return schemas.ArticleListResponse(
        articles=[schemas.to_article_response(a) for a in articles],
        limit=limit,
        offset=offset,
        count=len(articles),
    )


@router.get("/articles/most-bids", response_model=schemas.ArticleListResponse)
async def most_bids(
    limit: int = Query(8, ge=1, le=100),
    offset: int = Query(0, ge=0),
    store: ArticleStore = Depends(get_article_store),
) -> schemas.ArticleListResponse:
    articles = await store.most_bids(limit=limit, offset=offset)
    return schemas.ArticleListResponse(
        articles=[schemas.to_article_response(a) for a in articles],
        limit=limit,
        offset=offset,
        count=len(articles),
    )


@router.get("/articles/{article_id}", response_model=schemas.ArticleResponse)
async def get_article(
    article_id: int,
    fallback: bool = False,
    store: ArticleStore = Depends(get_article_store),
) -> schemas.ArticleResponse:
    """
    With `fallback=true`, a missing article is answered with a placeholder
    article instead of a 404.
    """
    try:
        article = await store.get(article_id)
    except ArticleNotFoundError as exc:
        if not fallback:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        article = store.get_fallback(article_id)
    return schemas.to_article_response(article)


@router.get("/articles/{article_id}/poster", response_model=schemas.PosterResponse)
async def get_poster(
    article_id: int,
    store: ArticleStore = Depends(get_article_store),
) -> schemas.PosterResponse:
    article = await _get_or_404(store, article_id)
    return schemas.PosterResponse(article_id=article_id, poster=await store.get_poster(article))


@router.get("/articles/{article_id}/liked", response_model=schemas.LikedResponse)
async def is_liked(
    article_id: int,
    current_buyer: Buyer = Depends(auth_dependencies.get_current_buyer),
    store: ArticleStore = Depends(get_article_store),
) -> schemas.LikedResponse:
    article = await _get_or_404(store, article_id)
    return schemas.LikedResponse(
        article_id=article_id,
        liked=await store.is_liked_by(article, current_buyer),
    )


@router.post(
    "/articles",
    response_model=schemas.ArticleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_article(
    request: schemas.CreateArticleRequest,
    current_company: Company = Depends(auth_dependencies.get_current_company),
    store: ArticleStore = Depends(get_article_store),
) -> schemas.ArticleResponse:
    if request.auction_end < request.auction_start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="auction_end must not be before auction_start.",
        )

    try:
        article = await store.create(
            name=request.name,
            description=request.description,
            price=request.price,
            min_bidding=request.min_bidding,
            auction_start=request.auction_start,
            auction_end=request.auction_end,
            img_paths=request.img_paths,
            tmdb_movie_id=request.tmdb_movie_id,
            selling_company_id=current_company.id,
        )
    except TMDBError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return schemas.to_article_response(article)


@router.delete("/articles/{article_id}")
async def delete_article(
    article_id: int,
    current_company: Company = Depends(auth_dependencies.get_current_company),
    store: ArticleStore = Depends(get_article_store),
) -> dict:
    article = await _get_or_404(store, article_id)
    if article.selling_company_id != current_company.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the selling company can delete this article.",
        )
    await store.delete(article)
    return {"ok": True, "article_id": article_id}
