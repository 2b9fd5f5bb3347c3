# vms_sync/main.py
"""
FastAPI application entry point.
Includes security middleware, error handlers, all routers and the optional
periodic VMS sync loop.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from vms_sync.routers import sync, mappings, cameras, health
from vms_sync.database import create_tables
from vms_sync.config import settings
from vms_sync.exceptions import (
    VmsSyncError,
    TransportError,
    PayloadParseError,
    UnknownVmsError,
    MappingRuleError,
)
from vms_sync.utils.logger import get_logger
import time
import asyncio

logger = get_logger(__name__)

app = FastAPI(
    title="VMS Camera Sync API",
    description="Pulls camera lists from Dahua, Emstone, Hanwha and Naiz VMS and maps them to unified cameras.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
_ERROR_STATUS = {
    UnknownVmsError:   status.HTTP_400_BAD_REQUEST,
    MappingRuleError:  status.HTTP_400_BAD_REQUEST,
    TransportError:    status.HTTP_502_BAD_GATEWAY,
    PayloadParseError: status.HTTP_502_BAD_GATEWAY,
}


@app.exception_handler(VmsSyncError)
async def vms_sync_exception_handler(request: Request, exc: VmsSyncError):
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.warning(f"{request.url.path} → {status_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(sync.router,     prefix="/api/v1", tags=["🔄 VMS Sync"])
app.include_router(mappings.router, prefix="/api/v1", tags=["🧭 Mapping Rules"])
app.include_router(cameras.router,  prefix="/api/v1", tags=["📷 Cameras"])
app.include_router(health.router,   prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
_background_tasks: set = set()


@app.on_event("startup")
async def startup():
    logger.info("🚀 VMS Sync backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"📡 VMS configured: {list(settings.CONFIGURED_VMS.keys())}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")

    if settings.SYNC_INTERVAL_SECONDS > 0:
        from vms_sync.services.sync_service import start_periodic_sync
        task = asyncio.create_task(start_periodic_sync(settings.SYNC_INTERVAL_SECONDS), name="vms-periodic-sync")
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 VMS Sync backend shutting down...")
    for task in list(_background_tasks):
        task.cancel()
