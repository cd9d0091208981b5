from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from behavior_app.db.base import Base
from behavior_app.models.common import RowNumberMixin, UUIDPrimaryKeyMixin


class Student(UUIDPrimaryKeyMixin, RowNumberMixin, Base):
    __tablename__ = "students"

    student_code: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    class_name: Mapped[str] = mapped_column(String(64), nullable=False)
    initial_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deducted_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    added_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
