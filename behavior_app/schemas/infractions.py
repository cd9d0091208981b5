import datetime as dt

from pydantic import BaseModel, Field


class InfractionOut(BaseModel):
    id: str
    student_id: str
    student_name: str
    student_class: str
    date: dt.date | None
    behavior_id: str
    comment: str
    created_at: dt.datetime | None


class InfractionHistoryItem(InfractionOut):
    behavior_name: str | None
    behavior_score: int | None
    behavior_type: str | None


class InfractionCreateRequest(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=36)
    behavior_id: str = Field(..., min_length=1, max_length=36)
    date: dt.date | None = None
    comment: str = Field(default="", max_length=1024)
