from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from remind_service.api.v1.router import api_router
from remind_service.core.config import get_settings
from remind_service.core.exceptions import AppError
from remind_service.core.logging import configure_logging
from remind_service.core.middleware import RequestIDMiddleware
from remind_service.core.responses import error_response, success_response
from remind_service.db.session import engine
from remind_service.integrations.redis import close_redis

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Remind service startup")
    yield
    await close_redis()
    await engine.dispose()
    logger.info("Remind service shutdown")


def _error(request: Request, status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_response(code, message, details, request=request))


async def app_error_handler(request: Request, exc: AppError):
    return _error(request, exc.status_code, exc.code, exc.message, exc.details or None)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = "not_found" if exc.status_code == 404 else "http_error"
    return _error(request, exc.status_code, code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Only loc/msg/type are reported; pydantic's ctx may hold exception objects.
    errors = [
        {"loc": [str(part) for part in error["loc"]], "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    field = ".".join(errors[0]["loc"]) if errors else "request"
    return _error(request, 422, "validation_error", "Request validation failed", {"field": field, "errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", exc_info=exc, extra={"path": request.url.path})
    return _error(request, 500, "internal_error", "Internal server error")


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(
        title=settings.project_name,
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[{"name": "Reminds", "description": "Remind batches, throttling and cancellation"}],
    )
    application.add_middleware(RequestIDMiddleware)
    application.include_router(api_router, prefix=settings.api_v1_prefix)

    @application.get("/healthz", tags=["Health"])
    async def healthz(request: Request):
        return success_response(data={"status": "ok"}, request=request)

    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)
    return application


app = create_app()
