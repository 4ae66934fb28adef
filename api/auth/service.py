"""
Auth business logic.
"""

from __future__ import annotations

import os

from starlette.datastructures import MutableHeaders

from core.cookies import Cookie, add_cookie
from core.errors import UnexpectedStateError

from . import schemas
from .models import Account
from .repository import AccountRepository, AccountTypeMismatchError
from .session import SESSION_COOKIE_NAME


def session_cookie_secure() -> bool:
    return os.environ.get("SESSION_COOKIE_SECURE", "").strip().lower() in {"1", "true", "yes"}


async def describe_account(accounts: AccountRepository, account: Account) -> schemas.AccountResponse:
    """
    Narrow the account to its role and describe it.

    An account is exactly one of buyer or company; anything else raises
    UnexpectedStateError.
    """
    try:
        buyer = await accounts.get_buyer(account)
    except AccountTypeMismatchError:
        buyer = None

    try:
        company = await accounts.get_company(account)
    except AccountTypeMismatchError:
        company = None

    if buyer is not None and company is not None:
        raise UnexpectedStateError(f"account {account.id} is both a buyer and a company")

    if buyer is not None:
        return schemas.AccountResponse(
            id=account.id,
            email=account.email,
            role="buyer",
            profile_id=buyer.id,
            display_name=f"{buyer.firstname} {buyer.lastname}",
        )

    if company is None:
        raise UnexpectedStateError(f"account {account.id} is neither a buyer nor a company")
    return schemas.AccountResponse(
        id=account.id,
        email=account.email,
        role="company",
        profile_id=company.id,
        display_name=company.name,
    )


async def logout(
    accounts: AccountRepository,
    account: Account,
    response_headers: MutableHeaders,
) -> schemas.LogoutResponse:
    await accounts.clear_session(account)
    # Expire the browser-side cookie as well.
    add_cookie(
        response_headers,
        Cookie(
            name=SESSION_COOKIE_NAME,
            value="",
            max_age=0,
            secure=session_cookie_secure(),
            path="/",
        ),
    )
    return schemas.LogoutResponse()
