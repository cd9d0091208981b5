from pydantic import BaseModel, Field

BEHAVIOR_TYPES = ("positive", "negative")


class BehaviorOut(BaseModel):
    id: str
    name: str
    score: int
    type: str


class BehaviorSaveRequest(BaseModel):
    id: str | None = None
    name: str = Field(default="", max_length=255)
    score: int = 0
    type: str = Field(default="", max_length=16)
