# ───────────────────────────────────────────────────────────────
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.engine import Engine
from sqlalchemy.orm import configure_mappers

# ─── Local imports ─────────────────────────────────────────────
from src.app.config.settings import Settings, get_settings
from src.app.db.session import build_engine, create_db_and_tables
from src.app.utils.ai_gateway import AIGatewayClient

# Import every model so mappers can be configured before the first request
from src.app.models import (  # noqa: F401
    User, UserRole, Assignment, Submission, Quiz, QuizQuestion,
    Grade, SubmissionEvaluation, PlagiarismReport,
)

# Import routers
from src.app.routers import ai_router, student_router

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as ``{"error": "..."}`` with a status code."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            f"{location}: {message}" if location else message,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[AIGatewayClient] = None,
    engine: Optional[Engine] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # ─── FastAPI app ───────────────────────────────────────────────
    app = FastAPI(
        title="Campus AI Portal",
        description="AI-assisted quiz, assignment, evaluation and learning-path API",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.engine = engine or build_engine(settings.database_url)
    # One gateway client per process, built from settings
    app.state.ai_gateway = gateway or AIGatewayClient(settings)

    # ─── Middlewares ───────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # ─── Startup ───────────────────────────────────────────────────
    @app.on_event("startup")
    async def on_startup():
        logger.info("Configuring SQLAlchemy mappers...")
        try:
            configure_mappers()
            logger.info("Mappers configured successfully.")
        except Exception as e:
            logger.error(f"Mapper configuration failed: {e}", exc_info=True)
            raise

        logger.info("Creating database and tables...")
        try:
            create_db_and_tables(app.state.engine)
        except Exception as e:
            logger.error(f"Failed to create database and tables: {e}", exc_info=True)
            raise

    # ─── Routers ───────────────────────────────────────────────────
    app.include_router(ai_router.router, prefix="/api/ai")
    app.include_router(student_router.router, prefix="/api/student")

    # ─── Simple endpoints ──────────────────────────────────────────
    @app.get("/")
    async def root():
        return {
            "message": "Welcome to the Campus AI Portal API",
            "docs_url": "/docs",
            "redoc_url": "/redoc",
        }

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
