"""Users Routes: create/read/update/delete/list over the /users collection.

Invariants:
    - Bodies, path ids and query params are validated by Pydantic/FastAPI before
      reaching the repository (non-integer or out-of-range ids are 400, not 404)
    - One UserRepository per request, bound to the request-scoped session
    - Errors propagate as CrudApiError and are rendered by error_handlers
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crud_api.config import Settings, get_settings
from crud_api.core.domain_types import SortOrder
from crud_api.core.listing import MAX_USER_ID, Pagination, UserFilter
from crud_api.core.repository_protocols import UserStore
from crud_api.infrastructure.database import get_db
from crud_api.schemas.user import (
    DeleteResponse, PaginationInfo, UserCreate, UserListResponse,
    UserResponse, UserUpdate,
)
from crud_api.services.user_repository import UserRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])

UserIdPath = Annotated[
    int, Path(ge=1, le=MAX_USER_ID, description="Store-assigned user identifier"),
]


def get_user_repository(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserStore:
    return UserRepository(
        db,
        default_pagination=Pagination(
            limit=settings.default_page_size,
            order=settings.default_sort_order,
            max_limit=settings.max_page_size,
        ),
        batch_size=settings.list_batch_size,
    )


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, repo: UserStore = Depends(get_user_repository),
):
    """Create a user; the store assigns the id."""
    user = await repo.create(body)
    return UserResponse.model_validate(user)


@router.get("", response_model=UserListResponse)
async def list_users(
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    order: SortOrder | None = Query(None),
    name: str | None = Query(None, max_length=255),
    email: str | None = Query(None, max_length=320),
    name_contains: str | None = Query(None, max_length=255),
    repo: UserStore = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
):
    """List users ordered by creation time with filter and pagination."""
    pagination = Pagination(
        limit=limit or settings.default_page_size,
        offset=offset,
        order=order or settings.default_sort_order,
        max_limit=settings.max_page_size,
    )
    user_filter = UserFilter(name=name, email=email, name_contains=name_contains)
    users = await repo.list(user_filter, pagination).collect()
    total = await repo.count(user_filter)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        pagination=PaginationInfo(
            limit=pagination.limit,
            offset=pagination.offset,
            order=pagination.order,
            total=total,
        ),
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UserIdPath,
    repo: UserStore = Depends(get_user_repository),
):
    user = await repo.read(user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def replace_user(
    body: UserCreate,
    user_id: UserIdPath,
    repo: UserStore = Depends(get_user_repository),
):
    """Whole-resource replace: every field required."""
    user = await repo.replace(user_id, body)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    body: UserUpdate,
    user_id: UserIdPath,
    repo: UserStore = Depends(get_user_repository),
):
    """Partial update: only the fields sent are replaced."""
    user = await repo.update(user_id, body)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=DeleteResponse)
async def delete_user(
    user_id: UserIdPath,
    repo: UserStore = Depends(get_user_repository),
):
    """Hard delete."""
    result = await repo.delete(user_id)
    return DeleteResponse(id=result.id, deleted=result.deleted)
