"""
Auth API schemas (response models).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class AccountResponse(BaseModel):
    id: int
    email: str
    role: Literal["buyer", "company"]
    profile_id: int
    display_name: str


class LogoutResponse(BaseModel):
    ok: bool = True
