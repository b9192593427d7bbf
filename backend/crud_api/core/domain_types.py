"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps a positive int assigned by the store
    - Sort directions encoded as an Enum, never raw string matching
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)


# ─── Enums ───────────────────────────────────────────────────────

class SortOrder(str, Enum):
    """Creation-time ordering for list results."""
    ASC = "asc"
    DESC = "desc"
