"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so services avoid SQL strings.
There is no foreign key between restaurant and history; services keep them in step.
"""
from __future__ import annotations
