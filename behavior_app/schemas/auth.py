from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., max_length=128)
    password: str = Field(..., max_length=256)


class TeacherOut(BaseModel):
    id: str
    name: str
    username: str
