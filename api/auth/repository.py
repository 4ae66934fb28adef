"""
Account persistence helpers.
"""

from __future__ import annotations

import logging

from core.db import Database
from core.errors import UnexpectedStateError

from .models import Account, Buyer, Company

logger = logging.getLogger(__name__)


class SessionTokenInvalidError(RuntimeError):
    def __init__(self, message: str = "Session token is invalid."):
        super().__init__(message)


class CaCestVraimentPasDeBolError(RuntimeError):
    """
    Really bad luck: one session token is stored on several accounts.
    This is a data-integrity problem, never resolved by picking one.
    """

    def __init__(self, account_count: int):
        super().__init__(f"Session token is shared by {account_count} accounts.")
        self.account_count = account_count


class AccountTypeMismatchError(RuntimeError):
    def __init__(self, account_id: int, expected: str):
        super().__init__(f"Account {account_id} is not a {expected}.")
        self.account_id = account_id
        self.expected = expected


class AccountRepository:
    def __init__(self, db: Database):
        self._db = db

    async def get_by_session(self, token: str) -> Account:
        """
        Return the account holding session `token`.

        Raises SessionTokenInvalidError when no account has it and
        CaCestVraimentPasDeBolError when more than one does.
        """
        rows = await self._db.fetch_all(
            """
            SELECT acc_id, acc_email, acc_session_token
            FROM account
            WHERE acc_session_token = $1
            """,
            token,
        )
        if not rows:
            raise SessionTokenInvalidError()
        if len(rows) > 1:
            logger.error("session_lookup_ambiguous account_count=%s", len(rows))
            raise CaCestVraimentPasDeBolError(len(rows))
        return Account.from_row(rows[0])

    async def get_buyer(self, account: Account) -> Buyer:
        rows = await self._db.fetch_all(
            """
            SELECT b_id, acc_id, b_firstname, b_lastname
            FROM buyer
            WHERE acc_id = $1
            """,
            account.id,
        )
        if not rows:
            raise AccountTypeMismatchError(account.id, "buyer")
        if len(rows) > 1:
            raise UnexpectedStateError(f"account {account.id} has {len(rows)} buyer profiles")
        return Buyer.from_row(rows[0], account)

    async def get_company(self, account: Account) -> Company:
        rows = await self._db.fetch_all(
            """
            SELECT c_id, acc_id, c_name
            FROM company
            WHERE acc_id = $1
            """,
            account.id,
        )
        if not rows:
            raise AccountTypeMismatchError(account.id, "company")
        if len(rows) > 1:
            raise UnexpectedStateError(f"account {account.id} has {len(rows)} company profiles")
        return Company.from_row(rows[0], account)

    async def clear_session(self, account: Account) -> None:
        await self._db.execute(
            """
            UPDATE account
            SET acc_session_token = NULL
            WHERE acc_id = $1
            """,
            account.id,
        )
