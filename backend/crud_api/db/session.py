"""Schema Bootstrap: CREATE TABLE IF NOT EXISTS for every registered model.

Used by the app lifespan when database_auto_create is on, and by test fixtures.
Managed deployments run the alembic migrations instead.
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from crud_api.db.base import Base


async def create_schema(engine: AsyncEngine) -> None:
    import crud_api.models  # noqa: F401  (registers tables on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
