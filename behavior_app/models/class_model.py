from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from behavior_app.db.base import Base
from behavior_app.models.common import RowNumberMixin, UUIDPrimaryKeyMixin


class SchoolClass(UUIDPrimaryKeyMixin, RowNumberMixin, Base):
    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
