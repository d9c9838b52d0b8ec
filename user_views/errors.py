"""Lookup failures raised by the view repositories.

Storage failures are not wrapped: SQLAlchemy's own exceptions reach the caller
unchanged.
"""

from __future__ import annotations


class LocalUserViewError(Exception):
    """Base class for view lookup failures."""


class LocalUserNotFoundError(LocalUserViewError, LookupError):
    def __init__(self, lookup: str, value: object) -> None:
        super().__init__(f"No local user matches {lookup}={value!r}.")
        self.lookup = lookup
        self.value = value


class LocalUserIntegrityError(LocalUserViewError, RuntimeError):
    """A local user and person exist but the person has no aggregates row."""

    def __init__(self, lookup: str, value: object) -> None:
        super().__init__(f"Local user matching {lookup}={value!r} has no person_aggregates row.")
        self.lookup = lookup
        self.value = value


__all__ = [
    "LocalUserIntegrityError",
    "LocalUserNotFoundError",
    "LocalUserViewError",
]
