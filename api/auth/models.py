"""
Account domain objects.

An `Account` is the authenticated identity (it holds the session token). Each
account is exactly one of a `Buyer` or a `Company`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Account:
    id: int
    email: str
    session_token: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Account:
        return cls(
            id=int(row["acc_id"]),
            email=str(row["acc_email"]),
            session_token=row.get("acc_session_token"),
        )


@dataclass(frozen=True)
class Buyer:
    id: int
    account: Account
    firstname: str
    lastname: str

    @classmethod
    def from_row(cls, row: dict[str, Any], account: Account) -> Buyer:
        return cls(
            id=int(row["b_id"]),
            account=account,
            firstname=str(row["b_firstname"]),
            lastname=str(row["b_lastname"]),
        )


@dataclass(frozen=True)
class Company:
    id: int
    account: Account
    name: str

    @classmethod
    def from_row(cls, row: dict[str, Any], account: Account) -> Company:
        return cls(
            id=int(row["c_id"]),
            account=account,
            name=str(row["c_name"]),
        )
