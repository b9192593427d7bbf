"""User ORM: the single resource persisted by the service.

Invariants:
    - id is an integer primary key assigned by the store (serial / rowid)
    - email is unique across live users (uq_users_email)
    - created_at is set once; updated_at is only advanced by the repository
"""

from datetime import datetime

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from crud_api.core.timestamps import utcnow
from crud_api.db.base import Base
from crud_api.db.types import UTCDateTime


class User(Base):
    """User row: name, email and lifecycle timestamps."""
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow, index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
