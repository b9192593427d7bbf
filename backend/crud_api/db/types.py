"""Custom column types."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from crud_api.core.timestamps import ensure_utc


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes in both directions, including on SQLite."""
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        return ensure_utc(value) if value is not None else None

    def process_result_value(self, value: datetime | None, dialect):
        return ensure_utc(value) if value is not None else None
