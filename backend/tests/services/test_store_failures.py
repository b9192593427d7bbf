"""Store Failures: outages map to StoreUnavailableError; cancellation leaves no partial effects."""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import DataError, InvalidRequestError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from crud_api.core.errors import StoreUnavailableError
from crud_api.models.user import User
from crud_api.services.user_repository import UserRepository


def _outage(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, ConnectionRefusedError("store down"))


async def test_read_during_outage_is_store_unavailable(test_db, monkeypatch):
    repo = UserRepository(test_db)
    monkeypatch.setattr(test_db, "get", _outage)
    with pytest.raises(StoreUnavailableError) as exc_info:
        await repo.read(1)
    assert exc_info.value.operation == "read"
    assert exc_info.value.http_status == 503


async def test_list_and_count_during_outage(test_db, monkeypatch):
    repo = UserRepository(test_db)
    monkeypatch.setattr(test_db, "execute", _outage)
    with pytest.raises(StoreUnavailableError):
        await repo.list().collect()
    with pytest.raises(StoreUnavailableError):
        await repo.count()


async def test_create_during_outage(test_db, monkeypatch):
    repo = UserRepository(test_db)
    monkeypatch.setattr(test_db, "commit", _outage)
    with pytest.raises(StoreUnavailableError):
        await repo.create({"name": "a", "email": "a@example.com"})


async def test_cancelled_create_has_no_effect(test_db, test_session_factory, monkeypatch):
    repo = UserRepository(test_db)
    flushed = asyncio.Event()
    never = asyncio.Event()

    async def stalled_commit():
        await test_db.flush()
        flushed.set()
        await never.wait()

    monkeypatch.setattr(test_db, "commit", stalled_commit)
    task = asyncio.create_task(repo.create({"name": "a", "email": "a@example.com"}))
    await flushed.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    async with test_session_factory() as other:
        total = (await other.execute(select(func.count()).select_from(User))).scalar_one()
    assert total == 0


async def test_session_manager_maps_outage_and_reports_unhealthy(db_manager, monkeypatch):
    assert await db_manager.health_check() is True

    async def broken(self, *args, **kwargs):
        _outage()

    monkeypatch.setattr(AsyncSession, "execute", broken)
    assert await db_manager.health_check() is False


async def test_programming_errors_are_not_reported_as_outages(test_db, monkeypatch):
    def misuse(*args, **kwargs):
        raise InvalidRequestError("bad query construction")

    repo = UserRepository(test_db)
    monkeypatch.setattr(test_db, "get", misuse)
    with pytest.raises(InvalidRequestError):
        await repo.read(1)


async def test_data_errors_are_not_reported_as_outages(test_db, monkeypatch):
    def out_of_range(*args, **kwargs):
        raise DataError("SELECT", {}, ValueError("value out of int32 range"))

    repo = UserRepository(test_db)
    monkeypatch.setattr(test_db, "execute", out_of_range)
    with pytest.raises(DataError):
        await repo.count()
