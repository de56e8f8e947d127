"""FastAPI entrypoint for the ECAT quiz application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from ecat_quiz.config import Settings, get_settings
from ecat_quiz.errors import StoreError
from ecat_quiz.logging_config import configure_logging
from ecat_quiz.routers import auth as auth_router_module
from ecat_quiz.routers import quizzes as quizzes_router_module
from ecat_quiz.routers import results as results_router_module
from ecat_quiz.seed import initialize_test_data
from ecat_quiz.services.quiz_service import QuizService
from ecat_quiz.stores import build_store

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Compose the store, the service and the HTTP routes."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    service = QuizService(build_store(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize database schema and seed demo accounts."""
        service.initialize()
        if settings.SEED_TEST_DATA:
            initialize_test_data(service)
        yield

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.quiz_service = service

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        """Report a generic failure; details go to the log only."""
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Something went wrong"},
        )

    # Session middleware for simple cookie-based authentication
    app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY)

    # Routers
    app.include_router(auth_router_module.router, prefix="/auth", tags=["auth"])
    app.include_router(quizzes_router_module.router, prefix="/quizzes", tags=["quizzes"])
    app.include_router(results_router_module.router, prefix="/results", tags=["results"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
