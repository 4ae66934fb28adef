"""
Session resolution: request headers -> Account -> Buyer / Company.

The session token travels in the `token` cookie.
"""

from __future__ import annotations

import re
from typing import Mapping

from .models import Account, Buyer, Company
from .repository import AccountRepository, SessionTokenInvalidError

SESSION_COOKIE_NAME = "token"

# The key must open the header or follow a separator, so "csrftoken=" is not a match.
_TOKEN_RE = re.compile(r"(?:^|;)\s*token=([^;]*);")


def extract_session_token(cookie_header: str | None) -> str:
    """
    Return the value of the first `token` entry of a `cookie` header.

    Raises SessionTokenInvalidError when the header is missing or has no
    (non-empty) token.
    """
    if not cookie_header:
        raise SessionTokenInvalidError("Missing cookie header.")

    cookies = cookie_header if cookie_header.endswith(";") else cookie_header + ";"
    match = _TOKEN_RE.search(cookies)
    if match is None or not match.group(1):
        raise SessionTokenInvalidError("No session token in cookies.")
    return match.group(1)


class SessionResolver:
    def __init__(self, accounts: AccountRepository):
        self.accounts = accounts

    async def resolve_account(self, headers: Mapping[str, str]) -> Account:
        """
        Raises:
            SessionTokenInvalidError: no token, or the token is unknown.
            CaCestVraimentPasDeBolError: the token is stored on several accounts.
        """
        token = extract_session_token(headers.get("cookie"))
        return await self.accounts.get_by_session(token)

    async def resolve_buyer(self, headers: Mapping[str, str]) -> Buyer:
        """
        Same errors as `resolve_account`, plus AccountTypeMismatchError when
        the account is not a buyer.
        """
        account = await self.resolve_account(headers)
        return await self.accounts.get_buyer(account)

    async def resolve_company(self, headers: Mapping[str, str]) -> Company:
        """
        Same errors as `resolve_account`, plus AccountTypeMismatchError when
        the account is not a company.
        """
        account = await self.resolve_account(headers)
        return await self.accounts.get_company(account)
