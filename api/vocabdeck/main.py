from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
import random
import traceback
from typing import Optional

from vocabdeck.core.config import settings
from vocabdeck.core.database import engine, init_db
from vocabdeck.core.exceptions import (
    VocabDeckException,
    ValidationError,
    NotFoundError,
    ConflictError,
    GenerationError,
)

# Import models to register them with SQLModel
from vocabdeck import models  # noqa: F401

from vocabdeck.api.v1 import api_router
from vocabdeck.services.generation_service import GenerationService
from vocabdeck.services.persistence_service import load_store
from vocabdeck.services.study_session_service import StudySession

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Check if we're in development mode
IS_DEVELOPMENT = settings.environment.lower() in ("development", "dev", "local")


def create_app(rng: Optional[random.Random] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        rng: Random source for session shuffling (tests pass a seeded one)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the deck and wire the shared services on startup."""
        init_db()
        store = load_store(engine)
        app.state.card_store = store
        app.state.study_session = StudySession(store, rng=rng)
        app.state.generation_service = GenerationService()
        logger.info(f"VocabDeck started with {len(store)} card(s)")
        yield

    app = FastAPI(title="VocabDeck API", version="1.0.0", lifespan=lifespan)

    # Add exception handler for validation errors to log details
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Log validation errors with full details for debugging."""
        logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_errors(exc)},
        )

    # Add exception handler for custom application exceptions
    @app.exception_handler(VocabDeckException)
    async def vocabdeck_exception_handler(request: Request, exc: VocabDeckException):
        """Handle custom application exceptions."""
        if isinstance(exc, ValidationError):
            status_code = status.HTTP_400_BAD_REQUEST
        elif isinstance(exc, NotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
        elif isinstance(exc, ConflictError):
            status_code = status.HTTP_409_CONFLICT
        elif isinstance(exc, GenerationError):
            status_code = status.HTTP_502_BAD_GATEWAY
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        logger.warning(f"Application exception on {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "type": type(exc).__name__},
        )

    # Add global exception handler for unhandled errors
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch all unhandled exceptions and return a JSON error."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)

        # In development, show full error details
        if IS_DEVELOPMENT:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": str(exc),
                    "type": type(exc).__name__,
                    "traceback": traceback.format_exc()
                },
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An internal server error occurred. Please try again later.",
                "type": "InternalServerError"
            },
        )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {
            "message": "VocabDeck API",
            "status": "running",
            "docs": {
                "swagger": "/docs",
                "redoc": "/redoc"
            }
        }

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw exception objects pydantic attaches in ctx."""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


app = create_app()
