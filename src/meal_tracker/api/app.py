"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from meal_tracker.api.analytics import router as analytics_router
from meal_tracker.api.dependencies import API_PREFIX
from meal_tracker.api.favorites import router as favorites_router
from meal_tracker.api.food_entries import router as food_entries_router
from meal_tracker.api.foods import router as foods_router
from meal_tracker.api.profile import router as profile_router
from meal_tracker.api.streaks import router as streaks_router
from meal_tracker.app_logging import configure_logging
from meal_tracker.config import parse_cors_origins
from meal_tracker.containers import AppContainer
from meal_tracker.errors import (
    ConflictError,
    EstimationFailedError,
    EstimatorUnavailableError,
    FieldError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

INVALID_REQUEST = "Invalid request data"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Second Brain Meal Tracker", lifespan=lifespan)
    app.state.container = container

    origins = parse_cors_origins(container.settings.cors_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type"],
        )

    for router in (
        profile_router,
        food_entries_router,
        analytics_router,
        streaks_router,
        favorites_router,
        foods_router,
    ):
        app.include_router(router)

    @app.get("/health")
    @app.get(f"{API_PREFIX}/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(ValidationError)
    async def handle_validation(_: Request, exc: ValidationError) -> JSONResponse:
        return _invalid_request(exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            FieldError(field=_field_name(item.get("loc", ())), message=item["msg"])
            for item in exc.errors()
        ]
        return _invalid_request(errors)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)}
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(_: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"error": str(exc)}
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.exception(
            "Persistence failure",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal error"},
        )

    @app.exception_handler(EstimatorUnavailableError)
    async def handle_estimator_unavailable(
        _: Request, exc: EstimatorUnavailableError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "AI macro estimation is not available"},
        )

    @app.exception_handler(EstimationFailedError)
    async def handle_estimation_failed(
        _: Request, exc: EstimationFailedError
    ) -> JSONResponse:
        logger.warning("Macro estimation failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "Failed to estimate macros"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    return app


def _invalid_request(errors: list[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": INVALID_REQUEST,
            "details": [
                {"field": error.field, "message": error.message} for error in errors
            ],
        },
    )


def _field_name(location: tuple[object, ...] | list[object]) -> str:
    """Drop the body/query prefix FastAPI adds to error locations."""
    parts = [str(part) for part in location]
    if len(parts) > 1 and parts[0] in {"body", "query", "path", "header"}:
        parts = parts[1:]
    return ".".join(parts) or "body"
