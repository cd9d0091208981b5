from behavior_app.models.behavior import Behavior
from behavior_app.models.class_model import SchoolClass
from behavior_app.models.infraction import Infraction
from behavior_app.models.student import Student
from behavior_app.models.teacher import Teacher

__all__ = [
    "Teacher",
    "Behavior",
    "SchoolClass",
    "Student",
    "Infraction",
]
