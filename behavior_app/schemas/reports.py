from pydantic import BaseModel


class ReportRow(BaseModel):
    sequence: int
    id: str
    student_code: str
    name: str
    class_name: str
    initial_score: int
    added_score: int
    deducted_score: int
    net_score: int
