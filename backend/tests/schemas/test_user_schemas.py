"""User Schemas: boundary validation for create, partial update, and responses."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from crud_api.schemas.user import UserCreate, UserResponse, UserUpdate


def test_create_strips_name_and_lowercases_email():
    user = UserCreate(name="  Ada  ", email=" Ada@Example.COM ")
    assert user.name == "Ada"
    assert user.email == "ada@example.com"


@pytest.mark.parametrize("payload", [
    {"email": "a@b.co"},
    {"name": "a"},
    {"name": "   ", "email": "a@b.co"},
    {"name": "a", "email": "not-an-email"},
    {"name": "a", "email": "a@b"},
    {"name": 5, "email": "a@b.co"},
    {"name": "x" * 256, "email": "a@b.co"},
    {"name": "a", "email": "a@b.co", "role": "admin"},
])
def test_create_rejects_invalid_payloads(payload):
    with pytest.raises(ValidationError):
        UserCreate(**payload)


def test_update_keeps_only_sent_fields():
    update = UserUpdate(name="b")
    assert update.changes() == {"name": "b"}


def test_update_requires_at_least_one_field():
    with pytest.raises(ValidationError):
        UserUpdate()


def test_update_rejects_explicit_null():
    with pytest.raises(ValidationError):
        UserUpdate.model_validate({"name": None})


def test_update_validates_given_email():
    with pytest.raises(ValidationError):
        UserUpdate(email="nope")
    assert UserUpdate(email="B@X.IO").changes() == {"email": "b@x.io"}


def test_response_attaches_utc_to_naive_timestamps():
    naive = datetime(2026, 1, 1, 8, 30)
    resp = UserResponse(id=1, name="a", email="a@b.co", created_at=naive, updated_at=naive)
    assert resp.created_at.tzinfo is not None
    assert resp.updated_at == datetime(2026, 1, 1, 8, 30, tzinfo=timezone.utc)
