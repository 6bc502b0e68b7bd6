# medicaledu/main.py
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, List, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError as FastAPIValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from medicaledu import __version__
from medicaledu.core.application import features  # noqa: F401  (registers handlers and validators)
from medicaledu.core.application.exceptions import RequestValidationError, ResultFailureError
from medicaledu.core.application.result import ErrorType
from medicaledu.core.domain.exceptions import DomainError, EntityNotFoundError
from medicaledu.db.session import init_db
from medicaledu.routers import (
    availability_slots,
    bookings,
    courses,
    dependencies,
    enrollments,
    health,
    notifications,
    payments,
    promo_codes,
    ratings,
    users,
)
from medicaledu.shared.config import AppEnv, settings
from medicaledu.shared.container import Container
from medicaledu.shared.logging_config import configure_logging
from medicaledu.shared.telemetry import instrument_fastapi, setup_telemetry

logger = structlog.get_logger()

RESULT_STATUS = {
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorType.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorType.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorType.FAILURE: status.HTTP_400_BAD_REQUEST,
}


def error_response(status_code: int, message: str, errors: Optional[List[Any]] = None) -> JSONResponse:
    """The single error envelope every failure is rendered with."""
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "code": status_code,
            "message": message,
            "errors": errors or [],
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application Lifecycle Manager.
    Handles startup (Logging, Telemetry, Schema) and shutdown.
    """
    configure_logging()
    setup_telemetry(settings)
    if settings.APP_ENV != AppEnv.PRODUCTION:
        init_db()

    logger.info("app_starting", app=settings.APP_NAME, env=settings.APP_ENV.value, version=__version__)
    yield
    logger.info("app_stopping", app=settings.APP_NAME)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed.", exc.errors)

    @app.exception_handler(FastAPIValidationError)
    async def body_validation_handler(request: Request, exc: FastAPIValidationError):
        errors = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
        return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed.", errors)

    @app.exception_handler(PydanticValidationError)
    async def query_validation_handler(request: Request, exc: PydanticValidationError):
        errors = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
        return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed.", errors)

    @app.exception_handler(ResultFailureError)
    async def result_failure_handler(request: Request, exc: ResultFailureError):
        result = exc.result
        code = RESULT_STATUS.get(result.error_type, status.HTTP_400_BAD_REQUEST)
        message = result.errors[0] if len(result.errors) == 1 else "Request failed."
        return error_response(code, message, list(result.errors))

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError):
        return error_response(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return error_response(status.HTTP_400_BAD_REQUEST, exc.message, [exc.message])

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("integrity_error", error=str(exc.orig))
        return error_response(status.HTTP_409_CONFLICT, "The change conflicts with existing data.")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catches unhandled exceptions to prevent leaking stack traces in Prod.
        """
        logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(exc) if settings.DEBUG else "Internal Server Error",
        )


def create_app() -> FastAPI:
    """
    Factory function to create the FastAPI application.
    """
    container = Container()
    container.wire(modules=[dependencies])

    app = FastAPI(
        title="MedicalEdu API",
        version=__version__,
        description="Medical-education marketplace: courses, sessions, bookings and payments",
        docs_url="/docs" if settings.APP_ENV != AppEnv.PRODUCTION else None,
        redoc_url="/redoc" if settings.APP_ENV != AppEnv.PRODUCTION else None,
        lifespan=lifespan,
    )
    app.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    instrument_fastapi(app)
    register_exception_handlers(app)

    app.include_router(health.router)
    for module in (users, courses, availability_slots, bookings, payments, enrollments, ratings, notifications, promo_codes):
        app.include_router(module.router, prefix="/api")

    return app


# Entry point for Uvicorn
app = create_app()
