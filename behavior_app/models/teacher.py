from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from behavior_app.db.base import Base
from behavior_app.models.common import RowNumberMixin, UUIDPrimaryKeyMixin


class Teacher(UUIDPrimaryKeyMixin, RowNumberMixin, Base):
    __tablename__ = "teachers"

    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    username: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(512), nullable=False)
