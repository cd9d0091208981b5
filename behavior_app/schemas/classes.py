from pydantic import BaseModel, Field


class ClassOut(BaseModel):
    id: str
    name: str


class ClassWithCount(ClassOut):
    student_count: int


class ClassSaveRequest(BaseModel):
    id: str | None = None
    name: str = Field(default="", max_length=64)
