"""
Auth API endpoints (session inspection and logout).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from . import dependencies, schemas, service
from .models import Account
from .repository import AccountRepository

router = APIRouter()


@router.get("/auth/me", response_model=schemas.AccountResponse)
async def me(
    current_account: Account = Depends(dependencies.get_current_account),
    accounts: AccountRepository = Depends(dependencies.get_account_repository),
) -> schemas.AccountResponse:
    return await service.describe_account(accounts, current_account)


@router.post("/auth/logout", response_model=schemas.LogoutResponse)
async def logout(
    response: Response,
    current_account: Account = Depends(dependencies.get_current_account),
    accounts: AccountRepository = Depends(dependencies.get_account_repository),
) -> schemas.LogoutResponse:
    return await service.logout(accounts, current_account, response.headers)
