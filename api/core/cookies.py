"""
Cookie helpers for responses.
"""

from __future__ import annotations

from dataclasses import dataclass

from starlette.datastructures import MutableHeaders


@dataclass(frozen=True)
class Cookie:
    name: str
    value: str
    max_age: int | None = None
    secure: bool = False
    path: str | None = None


def format_cookie(cookie: Cookie) -> str:
    """
    Build a `Set-Cookie` value. Name and value are written as-is (no escaping).
    """
    val = f"{cookie.name}={cookie.value};"
    # Max-Age=0 is meaningful (expire now), so only None skips it.
    val += f" Max-Age={cookie.max_age};" if cookie.max_age is not None else ""
    val += " Secure;" if cookie.secure else ""
    val += f" Path={cookie.path};" if cookie.path else ""
    return val


def add_cookie(headers: MutableHeaders, cookie: Cookie) -> None:
    """
    Append one `Set-Cookie` header to a response's headers.
    """
    headers.append("Set-Cookie", format_cookie(cookie))
