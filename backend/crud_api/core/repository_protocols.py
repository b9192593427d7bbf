"""Boundary Protocols: contracts between the request layer and the data access layer.

Invariants:
    - Routes depend on UserStore, never on a concrete SQL implementation
    - All IO operations are async because implementations await the store
"""

from typing import Any, AsyncIterator, Mapping, Protocol

from crud_api.core.domain_types import UserId
from crud_api.core.listing import Pagination, UserFilter


class UserLike(Protocol):
    """Structural contract for User objects returned by the store."""
    id: int
    name: str
    email: str


class UserListingLike(Protocol):
    """Lazy, restartable sequence of users."""
    def __aiter__(self) -> AsyncIterator[UserLike]: ...
    async def collect(self) -> list[UserLike]: ...


class UserStore(Protocol):
    """Contract for user persistence, implemented by services.user_repository."""
    async def create(self, fields: Mapping[str, Any]) -> UserLike: ...
    async def read(self, user_id: UserId) -> UserLike: ...
    async def update(
        self, user_id: UserId, partial_fields: Mapping[str, Any],
    ) -> UserLike: ...
    async def replace(
        self, user_id: UserId, fields: Mapping[str, Any],
    ) -> UserLike: ...
    async def delete(self, user_id: UserId) -> Any: ...
    def list(
        self,
        filter: UserFilter | None = None,
        pagination: Pagination | None = None,
    ) -> UserListingLike: ...
    async def count(self, filter: UserFilter | None = None) -> int: ...
