from pydantic import BaseModel, Field


class StudentOut(BaseModel):
    id: str
    student_code: str
    name: str
    class_name: str
    initial_score: int
    deducted_score: int
    added_score: int
    net_score: int


class StudentSaveRequest(BaseModel):
    id: str | None = None
    student_code: str = Field(default="", max_length=64)
    name: str = Field(default="", max_length=255)
    class_name: str = Field(default="", max_length=64)
    initial_score: int | None = None
