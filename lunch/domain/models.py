from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum


class Category(str, Enum):
    CHEAP = "cheap"
    NORMAL = "normal"

    @classmethod
    def parse(cls, value: "str | Category") -> "Category":
        """Case-insensitive lookup; raises ValueError for anything else."""
        if isinstance(value, Category):
            return value
        key = (value or "").strip().lower()
        for c in cls:
            if c.value == key:
                return c
        raise ValueError(f"unknown category: {value!r}")


@dataclass(frozen=True)
class Restaurant:
    name: str
    category: Category

    def to_dict(self) -> dict:
        d = asdict(self)
        d["category"] = self.category.value
        return d


@dataclass(frozen=True)
class HistoryRecord:
    name: str
    picked_at: str

    def to_dict(self) -> dict:
        return asdict(self)


def validate_name(name: str) -> str:
    # uniqueness is exact-match, so names are stored as given
    if name is None or not str(name).strip():
        raise ValueError("name must not be empty")
    return str(name)
