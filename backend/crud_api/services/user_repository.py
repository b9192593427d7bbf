"""User Repository: the data access layer, sole mediator between routes and the store.

Invariants:
    - Constructed per request with an explicitly passed AsyncSession (never a global)
    - Each operation is one transaction: committed on success, rolled back on any failure
    - id and created_at never change after create; updated_at strictly advances on update
    - Email uniqueness violations surface as ConflictError, store outages as
      StoreUnavailableError, missing rows as NotFoundError
    - list() is lazy and restartable: every iteration re-queries the store

Design Decisions:
    - Mapping input is validated here too, so callers outside FastAPI get the same
      schema checks as HTTP requests
    - Listing continues with keyset predicates on (created_at, id) between batches,
      so rows shifting under concurrent writes cannot be yielded twice
"""

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping, TypeVar

import pydantic
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from crud_api.core.domain_types import SortOrder, UserId
from crud_api.core.errors import NotFoundError, ValidationError
from crud_api.core.listing import Pagination, UserFilter, validate_user_id
from crud_api.core.timestamps import advance_timestamp, utcnow
from crud_api.infrastructure.database import store_operation
from crud_api.models.user import User
from crud_api.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)

_EMAIL_TAKEN = "A user with this email already exists"


@dataclass(frozen=True)
class DeleteResult:
    """Confirmation of a hard delete."""
    id: UserId
    deleted: bool = True


def _coerce(schema: type[SchemaT], fields: Any) -> SchemaT:
    """Validate loosely-typed input against a declared schema."""
    if isinstance(fields, schema):
        return fields
    if isinstance(fields, pydantic.BaseModel):
        fields = fields.model_dump(exclude_unset=True)
    if not isinstance(fields, Mapping):
        raise ValidationError(
            f"Expected a mapping of fields, got {type(fields).__name__}",
        )
    try:
        return schema.model_validate(dict(fields))
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Invalid user data",
            details=[
                {
                    "field": ".".join(str(loc) for loc in err["loc"]),
                    "message": err["msg"],
                    "type": err["type"],
                }
                for err in e.errors()
            ],
        ) from e


def _apply_filter(query, user_filter: UserFilter | None):
    if user_filter is None or user_filter.is_empty:
        return query
    if user_filter.name is not None:
        query = query.where(User.name == user_filter.name)
    if user_filter.email is not None:
        query = query.where(User.email == user_filter.email)
    if user_filter.name_contains:
        query = query.where(User.name.contains(user_filter.name_contains, autoescape=True))
    return query


class UserListing:
    """Lazy, restartable async sequence of users for one filter/pagination window."""

    def __init__(
        self,
        db: AsyncSession,
        user_filter: UserFilter | None,
        pagination: Pagination,
        batch_size: int = 50,
    ):
        self._db = db
        self.filter = user_filter
        self.pagination = pagination
        self._batch_size = max(1, batch_size)

    def _ordered(self, query):
        if self.pagination.order is SortOrder.DESC:
            return query.order_by(User.created_at.desc(), User.id.desc())
        return query.order_by(User.created_at.asc(), User.id.asc())

    def _after(self, query, last: User):
        if self.pagination.order is SortOrder.DESC:
            return query.where(or_(
                User.created_at < last.created_at,
                and_(User.created_at == last.created_at, User.id < last.id),
            ))
        return query.where(or_(
            User.created_at > last.created_at,
            and_(User.created_at == last.created_at, User.id > last.id),
        ))

    async def __aiter__(self) -> AsyncIterator[User]:
        remaining = self.pagination.limit
        last: User | None = None
        while remaining > 0:
            size = min(self._batch_size, remaining)
            query = self._ordered(_apply_filter(select(User), self.filter))
            if last is None:
                query = query.offset(self.pagination.offset)
            else:
                query = self._after(query, last)
            async with store_operation(self._db, "list"):
                result = await self._db.execute(query.limit(size))
                batch = list(result.scalars().all())
            for user in batch:
                yield user
            if len(batch) < size:
                return
            remaining -= len(batch)
            last = batch[-1]

    async def collect(self) -> list[User]:
        """Materialize one pass of the listing."""
        return [user async for user in self]


class UserRepository:
    """SQL implementation of the UserStore contract."""

    def __init__(
        self,
        db: AsyncSession,
        default_pagination: Pagination | None = None,
        batch_size: int = 50,
    ):
        self._db = db
        self._default_pagination = default_pagination or Pagination()
        self._batch_size = batch_size

    async def _get_for_write(self, user_id: UserId) -> User:
        result = await self._db.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True),
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User", str(user_id))
        return user

    async def create(self, fields: Mapping[str, Any] | UserCreate) -> User:
        data = _coerce(UserCreate, fields)
        now = utcnow()
        user = User(
            name=data.name, email=data.email, created_at=now, updated_at=now,
        )
        async with store_operation(
            self._db, "create", _EMAIL_TAKEN, conflict_field="email",
        ):
            self._db.add(user)
            await self._db.commit()
        logger.info("User created", extra={"user_id": user.id})
        return user

    async def read(self, user_id: UserId | int) -> User:
        user_id = validate_user_id(user_id)
        async with store_operation(self._db, "read"):
            user = await self._db.get(User, user_id, populate_existing=True)
            await self._db.commit()
        if user is None:
            raise NotFoundError("User", str(user_id))
        return user

    async def update(
        self, user_id: UserId | int, partial_fields: Mapping[str, Any] | UserUpdate,
    ) -> User:
        user_id = validate_user_id(user_id)
        changes = _coerce(UserUpdate, partial_fields).changes()
        return await self._write(user_id, changes, "update")

    async def replace(
        self, user_id: UserId | int, fields: Mapping[str, Any] | UserCreate,
    ) -> User:
        user_id = validate_user_id(user_id)
        changes = _coerce(UserCreate, fields).model_dump()
        return await self._write(user_id, changes, "replace")

    async def _write(self, user_id: UserId, changes: dict, operation: str) -> User:
        async with store_operation(
            self._db, operation, _EMAIL_TAKEN, conflict_field="email",
        ):
            user = await self._get_for_write(user_id)
            for key, value in changes.items():
                setattr(user, key, value)
            user.updated_at = advance_timestamp(user.updated_at, utcnow())
            await self._db.commit()
        logger.info(
            f"User {operation}d", extra={"user_id": user_id, "operation": operation},
        )
        return user

    async def delete(self, user_id: UserId | int) -> DeleteResult:
        user_id = validate_user_id(user_id)
        async with store_operation(self._db, "delete"):
            user = await self._get_for_write(user_id)
            await self._db.delete(user)
            await self._db.commit()
        logger.info("User deleted", extra={"user_id": user_id})
        return DeleteResult(id=user_id)

    def list(
        self,
        filter: UserFilter | None = None,
        pagination: Pagination | None = None,
    ) -> UserListing:
        return UserListing(
            self._db, filter, pagination or self._default_pagination,
            batch_size=self._batch_size,
        )

    async def count(self, filter: UserFilter | None = None) -> int:
        query = _apply_filter(select(func.count()).select_from(User), filter)
        async with store_operation(self._db, "count"):
            result = await self._db.execute(query)
            total = result.scalar_one()
        return total
