from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from academic_records.api.error_handlers import register_error_handlers
from academic_records.api.v1.enrollments.router import router as enrollments_router
from academic_records.api.v1.students.router import router as students_router
from academic_records.api.v1.subjects.router import router as subjects_router
from academic_records.api.v1.teachers.router import router as teachers_router
from academic_records.core.config import settings
from academic_records.core.logging import get_logger, setup_logging
from academic_records.db.session import engine, init_models

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    if settings.create_tables_on_startup:
        await init_models()
    logger.info("Application started", app_name=settings.app_name, environment=settings.environment)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Routers
    app.include_router(teachers_router)
    app.include_router(students_router)
    app.include_router(subjects_router)
    app.include_router(enrollments_router)

    return app


app = create_app()
