from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid4())


class UUIDPrimaryKeyMixin:
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)


class RowNumberMixin:
    """Keeps the sheet-like insertion order of a table's rows."""

    row_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
