"""
Main Application - FastAPI app factory and lifespan management
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import AppConfig, config as default_config
from .limiter import limiter
from .routers import health, tasks
from ..db import TaskStore, get_task_store, reset_task_store
from ..services.tasks import MSG_METHOD_NOT_ALLOWED, ApiResponse, TaskRequestHandler


logger = logging.getLogger(__name__)


def create_app(
    store: Optional[TaskStore] = None,
    app_config: Optional[AppConfig] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: TaskStore to serve; the process-wide store is used when omitted
        app_config: Settings; the global config is used when omitted
    """
    cfg = app_config or default_config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the task store once and share it across requests"""
        owned = store is None
        logger.info(
            "Starting Task API (store=%s)...",
            cfg.store_backend if owned else type(store).__name__,
        )

        task_store = get_task_store(cfg) if owned else store
        try:
            await task_store.open()
        except Exception as e:
            logger.exception("Failed to open task store")
            raise RuntimeError(f"Task store initialization failed: {e}") from e

        app.state.task_handler = TaskRequestHandler(task_store, timeout=cfg.request_timeout)

        yield

        logger.info("Shutting down...")
        app.state.task_handler = None
        if owned:
            try:
                await task_store.close()
                logger.info("Task store closed")
            except Exception:
                logger.exception("Failed to close task store cleanly")
            finally:
                reset_task_store()

    app = FastAPI(
        title="Task API",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        """Handle rate limit exceeded with JSON response."""
        return JSONResponse(
            status_code=429,
            content={"message": "Rate limit exceeded.", "retry_after": exc.detail},
        )

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        """Answer unregistered methods with the task handler's 405 envelope."""
        if exc.status_code == 405:
            return tasks.to_response(ApiResponse.error(405, MSG_METHOD_NOT_ALLOWED))
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with logging."""
        logger.exception("Unexpected error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error."},
        )

    app.include_router(health.router)
    app.include_router(tasks.router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.src.web.main:app",
        host=default_config.host,
        port=default_config.port,
        reload=default_config.debug,
    )
