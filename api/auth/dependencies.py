"""
Auth dependencies for protected FastAPI routes.

The session token comes from the `token` cookie. Domain errors are turned
into HTTP errors here so the rest of the code stays framework-agnostic.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from core import db

from .models import Account, Buyer, Company
from .repository import (
    AccountRepository,
    AccountTypeMismatchError,
    CaCestVraimentPasDeBolError,
    SessionTokenInvalidError,
)
from .session import SessionResolver


def get_account_repository(database: db.Database = Depends(db.database)) -> AccountRepository:
    return AccountRepository(database)


def get_session_resolver(
    accounts: AccountRepository = Depends(get_account_repository),
) -> SessionResolver:
    return SessionResolver(accounts)


def _unauthorized(exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=str(exc),
    )


async def get_current_account(
    request: Request,
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Account:
    try:
        return await resolver.resolve_account(request.headers)
    except (SessionTokenInvalidError, CaCestVraimentPasDeBolError) as exc:
        raise _unauthorized(exc) from exc


async def get_current_buyer(
    request: Request,
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Buyer:
    try:
        return await resolver.resolve_buyer(request.headers)
    except (SessionTokenInvalidError, CaCestVraimentPasDeBolError) as exc:
        raise _unauthorized(exc) from exc
    except AccountTypeMismatchError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc


async def get_current_company(
    request: Request,
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Company:
    try:
        return await resolver.resolve_company(request.headers)
    except (SessionTokenInvalidError, CaCestVraimentPasDeBolError) as exc:
        raise _unauthorized(exc) from exc
    except AccountTypeMismatchError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
