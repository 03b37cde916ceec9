"""Exceptions raised by the store, seeder and selector.

ConflictError and EmptyError are expected outcomes; their messages are the
user-facing strings the command layer shows unchanged.
"""
from __future__ import annotations


class LunchError(Exception):
    """Root for all lunch store errors."""


class ConflictError(LunchError, ValueError):
    """A restaurant with this name already exists."""

    def __init__(self, name: str):
        super().__init__(f"{name} already exists")
        self.name = name


class NotFoundError(LunchError, LookupError):
    """The restaurant being updated does not exist."""

    def __init__(self, name: str):
        super().__init__(f"{name} not found")
        self.name = name


class EmptyError(LunchError, LookupError):
    """No restaurant matched the pick filter."""

    def __init__(self, category: str | None = None):
        super().__init__("No restaurants found!")
        self.category = category


class StoreIOError(LunchError):
    """The underlying SQLite file could not be opened, read or written."""


class StoreBusyError(StoreIOError):
    """The store lock was not acquired within the configured timeout."""
