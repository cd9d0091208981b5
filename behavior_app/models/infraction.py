import datetime as dt

from sqlalchemy import Date, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from behavior_app.db.base import Base
from behavior_app.models.common import RowNumberMixin, UUIDPrimaryKeyMixin, utcnow


class Infraction(UUIDPrimaryKeyMixin, RowNumberMixin, Base):
    __tablename__ = "infractions"

    # No foreign keys: references are checked by the services before writing.
    student_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    student_class: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    behavior_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    comment: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
