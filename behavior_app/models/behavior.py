from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from behavior_app.db.base import Base
from behavior_app.models.common import RowNumberMixin, UUIDPrimaryKeyMixin


class Behavior(UUIDPrimaryKeyMixin, RowNumberMixin, Base):
    __tablename__ = "behaviors"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # positive | negative
