import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from behavior_app.api.router import api_router
from behavior_app.core.config import get_settings
from behavior_app.services.auth import read_teachers, upsert_teacher
from behavior_app.services.store import get_store

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.auto_create_teacher:
            store = get_store()
            usernames = {teacher.username for teacher, _ in read_teachers(store)}
            if settings.bootstrap_teacher_username not in usernames:
                upsert_teacher(
                    store,
                    username=settings.bootstrap_teacher_username,
                    password=settings.bootstrap_teacher_password,
                    name=settings.bootstrap_teacher_name,
                )
                logger.info("Bootstrap teacher %s created.", settings.bootstrap_teacher_username)
        yield

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    settings.media_path.mkdir(parents=True, exist_ok=True)
    app.mount("/media", StaticFiles(directory=str(settings.media_path)), name="media")
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()
