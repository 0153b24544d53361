"""
Health Router - API endpoints for health checks
"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/live")
async def health_live():
    """Liveness probe: server process is up"""
    return {"status": "live"}


@router.get("/ready")
async def health_ready(request: Request):
    """Readiness probe: a task store is attached"""
    handler = getattr(request.app.state, "task_handler", None)
    if handler is None:
        return JSONResponse(status_code=503, content={"status": "not_ready"})
    return JSONResponse(
        status_code=200,
        content={"status": "ready", "store": type(handler.store).__name__},
    )
