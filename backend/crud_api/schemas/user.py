"""User Schemas: Pydantic models with field-level validation for the users collection.

Invariants:
    - UserCreate: name 1-255 chars (stripped), email local@domain (stripped, lower-cased)
    - UserUpdate: every field optional, at least one given, explicit nulls rejected
    - Unknown fields are rejected on input (extra="forbid")
    - UserResponse timestamps are always timezone-aware UTC
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from crud_api.core.domain_types import SortOrder
from crud_api.core.listing import normalize_email
from crud_api.core.timestamps import ensure_utc

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    return v


class UserCreate(BaseModel):
    """Full set of user-supplied fields (POST, PUT)."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320, pattern=EMAIL_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class UserUpdate(BaseModel):
    """Partial field replace (PATCH)."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(
        None, min_length=3, max_length=320, pattern=EMAIL_PATTERN,
    )

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        if isinstance(data, dict):
            nulls = [k for k, v in data.items() if v is None]
            if nulls:
                raise ValueError(f"fields cannot be null: {', '.join(sorted(nulls))}")
        return data

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _clean_name(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return normalize_email(v) if v is not None else v

    def changes(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    """Public-facing user representation."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class DeleteResponse(BaseModel):
    """Confirmation of a hard delete."""
    id: int
    deleted: bool = True


class PaginationInfo(BaseModel):
    limit: int
    offset: int
    order: SortOrder
    total: int


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pagination: PaginationInfo
