"""
Errors shared across features.
"""

from __future__ import annotations


class UnexpectedStateError(RuntimeError):
    """
    Raised when the code reaches a state it assumes cannot happen
    (e.g. an account owning two buyer profiles).
    """

    def __init__(self, description: str):
        super().__init__(f"[Unexpected state] {description}")
        self.description = description
