import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rollcall.api.v1.router import api_v1_router
from rollcall.core.config import settings
from rollcall.core.logging import setup_logging
from rollcall.services.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RollcallError,
    ValidationError,
)

setup_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[RollcallError], int] = {
    ValidationError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
}

HTTP_ERROR_KINDS = {
    401: "unauthenticated",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@app.exception_handler(RollcallError)
async def rollcall_error_handler(request: Request, exc: RollcallError):
    status_code = next(
        (code for cls, code in ERROR_STATUS_CODES.items() if isinstance(exc, cls)),
        500,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": exc.kind},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": HTTP_ERROR_KINDS.get(exc.status_code, "http_error")},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(
        status_code=400,
        content={"detail": "; ".join(messages), "error": ValidationError.kind},
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": "internal"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": "internal"},
    )


@app.get("/health")
def health_check():
    return {"status": "healthy"}
