"""Lunch picker: a small SQLite-backed list of places to eat and a random picker over it."""
from __future__ import annotations

__version__ = "0.14.0"
