"""FastAPI application factory and lifespan."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workout_progress.api.v1 import api_router
from workout_progress.core.config import get_settings
from workout_progress.core.errors import (
    NoActiveSession,
    NotFound,
    SessionAlreadyActive,
    ValidationFailed,
    WorkoutError,
)
from workout_progress.db.base import Base
from workout_progress.db.session import async_session_maker, engine
from workout_progress.services import records
from workout_progress.services.catalog import DatabaseExerciseCatalog
from workout_progress.services.session_store import WorkoutSessionStore
from workout_progress.services.template_resolution import TemplateResolver

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[WorkoutError], int] = {
    NotFound: 404,
    NoActiveSession: 409,
    SessionAlreadyActive: 409,
    ValidationFailed: 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: optional create tables, load history into the session store; shutdown: cleanup."""
    # Use Alembic in production; create_all is for local SQLite runs and tests
    if settings.create_tables_on_startup:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as db:
        history = await records.load_history(db)
    catalog = DatabaseExerciseCatalog(async_session_maker)
    app.state.store = WorkoutSessionStore(history=history)
    app.state.catalog = catalog
    app.state.resolver = TemplateResolver(catalog)
    app.state.progress_lock = asyncio.Lock()
    logger.info("Loaded %d finished workouts", len(history.sessions))
    yield
    await engine.dispose()


async def workout_error_handler(request: Request, exc: WorkoutError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), 400)
    content: dict = {"detail": exc.message}
    if isinstance(exc, ValidationFailed) and exc.fields:
        content["fields"] = exc.fields
    return JSONResponse(status_code=status_code, content=content)


def create_application() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow localhost in dev; in production use CORS_ORIGINS env (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WorkoutError, workout_error_handler)

    @app.get("/")
    def root():
        return {"status": "ok", "message": "Workout Progress API"}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
