"""Listing Parameters: filter and pagination value objects for user listings.

Invariants:
    - Pagination.limit is within 1..max_limit; offset is never negative
    - UserFilter normalizes email the same way writes do (strip + lower)
    - validate_user_id accepts only ints in 1..MAX_USER_ID (bool rejected)
"""

from dataclasses import dataclass

from crud_api.core.domain_types import SortOrder, UserId
from crud_api.core.errors import ValidationError

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# users.id is a 32-bit INTEGER / SERIAL column
MAX_USER_ID = 2**31 - 1


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_user_id(user_id: object) -> UserId:
    """Return user_id as a UserId or raise ValidationError."""
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        if isinstance(user_id, str) and user_id.strip().isdecimal():
            user_id = int(user_id.strip())
        else:
            raise ValidationError(
                f"Invalid user id: {user_id!r}", field="id",
            )
    if not 1 <= user_id <= MAX_USER_ID:
        raise ValidationError(
            f"Invalid user id: {user_id!r}", field="id",
        )
    return UserId(user_id)


@dataclass(frozen=True)
class UserFilter:
    """Optional equality/substring constraints for list queries."""
    name: str | None = None
    email: str | None = None
    name_contains: str | None = None

    def __post_init__(self):
        if self.email is not None:
            object.__setattr__(self, "email", normalize_email(self.email))

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.email is None and not self.name_contains


@dataclass(frozen=True)
class Pagination:
    """Window over the ordered listing: skip `offset` rows, yield at most `limit`."""
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    order: SortOrder = SortOrder.ASC
    max_limit: int = MAX_LIMIT

    def __post_init__(self):
        if not 1 <= self.limit <= self.max_limit:
            raise ValidationError(
                f"limit must be between 1 and {self.max_limit}", field="limit",
            )
        if self.offset < 0:
            raise ValidationError("offset must be >= 0", field="offset")
        object.__setattr__(self, "order", SortOrder(self.order))
