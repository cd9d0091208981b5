from fastapi import APIRouter

from behavior_app.api import auth, behaviors, classes, dashboard, infractions, reports, students, system

api_router = APIRouter()
api_router.include_router(system.router)
api_router.include_router(auth.router)
api_router.include_router(dashboard.router)
api_router.include_router(behaviors.router)
api_router.include_router(classes.router)
api_router.include_router(students.public_router)
api_router.include_router(students.router)
api_router.include_router(infractions.router)
api_router.include_router(reports.router)
