"""Main FastAPI application module.

This module initializes the FastAPI application, registers all route handlers
and renders every error as ``{"success": false, "message": ...}``.
"""

import asyncio
import logging
import os
import signal
import sys

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging_config import setup_logging
from config import (
    API_HOST,
    API_PORT,
    CORS_ALLOWED_ORIGINS,
    FATAL_ERROR_GUARD,
    UPLOADS_DIR,
    UPLOADS_URL_PREFIX,
)
from api.routes import admin, auth, submissions, tasks

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="Challenge Portal API",
    description="Backend API service for team hackathon registration, submissions and grading.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(submissions.router)
app.include_router(admin.router)

# Submitted files are reachable at the fileUrl stored on each submission
UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first validation problem as a 400."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")


def _terminate() -> None:
    # Let the supervisor restart a clean process
    os.kill(os.getpid(), signal.SIGTERM)


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    exc = context.get("exception")
    logger.critical(
        "Unhandled error in event loop: %s",
        context.get("message"),
        exc_info=exc,
    )
    _terminate()


def _excepthook(exc_type, exc_value, exc_traceback) -> None:
    logger.critical(
        "Uncaught exception, shutting down",
        exc_info=(exc_type, exc_value, exc_traceback),
    )
    _terminate()


def install_fatal_error_guard() -> None:
    """Log errors that escape every handler at CRITICAL, then stop the process."""
    asyncio.get_running_loop().set_exception_handler(_loop_exception_handler)
    sys.excepthook = _excepthook


@app.on_event("startup")
async def startup_tasks() -> None:
    if FATAL_ERROR_GUARD:
        install_fatal_error_guard()
    logger.info("Challenge Portal API started; uploads at %s", UPLOADS_DIR)


@app.get("/", summary="API 根路径", tags=["Info"])
def root() -> dict:
    """API 根路径，返回 API 信息和文档链接。

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "Challenge Portal API",
        "version": "1.0.0",
        "description": "Backend API service for team hackathon registration, submissions and grading.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="健康检查", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print("🚀 启动 Challenge Portal API 服务器...")
    print(f"🌐 服务地址(后端服务): {server_url}")
    print(f"📚 API 文档: {server_url}/docs")
    print()

    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
