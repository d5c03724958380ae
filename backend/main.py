# main.py - TaskDesk API
# Features:
# - Role-scoped task assignment, teams and notifications
# - Request ids echoed on every response
# - Domain error -> HTTP status mapping
# - Admin bootstrap from environment on startup

import os
import uuid
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text

from database import init_db, close_db, engine, get_db_context
from errors import TaskDeskError
from telemetry import setup_telemetry

# Logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
)
logger = logging.getLogger("taskdesk")

VERSION = "1.0.0"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


def _check_startup_config() -> bool:
    """Warn about settings that make the deployment unusable or insecure."""
    problems = []
    if len(os.getenv("JWT_SECRET_KEY", "")) < 32:
        problems.append("JWT_SECRET_KEY is not set or shorter than 32 characters; tokens will not survive a restart")
    if not os.getenv("BOOTSTRAP_ADMIN_EMAIL"):
        problems.append("BOOTSTRAP_ADMIN_EMAIL not set; no admin account will be created on an empty database")

    for p in problems:
        logger.warning(p)
    return not problems


async def _bootstrap_admin():
    email = os.getenv("BOOTSTRAP_ADMIN_EMAIL")
    password = os.getenv("BOOTSTRAP_ADMIN_PASSWORD")
    if not email or not password:
        return

    from auth import AuthService
    from services.users import UserDirectory

    async with get_db_context() as db:
        directory = UserDirectory(db, AuthService.hash_password)
        await directory.ensure_bootstrap_admin(
            email, password, os.getenv("BOOTSTRAP_ADMIN_NAME", "Administrator"),
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting TaskDesk v{VERSION} ({ENVIRONMENT})")
    await init_db()
    _check_startup_config()
    await _bootstrap_admin()
    # No-op unless OTEL_EXPORTER_OTLP_ENDPOINT is set
    setup_telemetry(app)
    yield
    logger.info("TaskDesk stopping")
    await close_db()


app = FastAPI(
    title="TaskDesk",
    description="Task assignment, teams, notifications and performance rollups",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:4200,http://localhost:3000").split(",")
        if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)


# ============================================================
# MIDDLEWARE
# ============================================================

@app.middleware("http")
async def request_context(request: Request, call_next):
    request.state.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    started = time.perf_counter()

    response = await call_next(request)

    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers["X-Request-ID"] = request.state.request_id
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} "
        f"{elapsed_ms:.1f}ms rid={request.state.request_id[:8]}"
    )
    return response


# ============================================================
# EXCEPTION HANDLERS
# ============================================================

def _error_body(request: Request, detail) -> dict:
    return {"detail": detail, "request_id": getattr(request.state, "request_id", None)}


@app.exception_handler(TaskDeskError)
async def domain_error_handler(request: Request, exc: TaskDeskError):
    return JSONResponse(status_code=exc.status_code, content=_error_body(request, exc.message))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Only field location and message; raw inputs may hold passwords
    fields = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content=_error_body(request, fields))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=_error_body(request, "Internal server error"))


# ============================================================
# ROUTERS
# ============================================================

from routers import auth, users, tasks, teams, notifications, admin

for module in (auth, users, tasks, teams, notifications, admin):
    app.include_router(module.router)


# ============================================================
# HEALTH & ROOT
# ============================================================

@app.get("/health")
async def health_check():
    """Liveness plus a round trip to the database"""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        database = "connected"
    except Exception as e:
        logger.warning(f"Health check could not reach the database: {e}")
        database = "unreachable"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "version": VERSION,
        "environment": ENVIRONMENT,
        "database": database,
    }


@app.get("/")
async def root():
    return {"name": "TaskDesk", "version": VERSION, "docs": "/docs", "health": "/health"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=ENVIRONMENT == "development",
        workers=int(os.getenv("WORKERS", 1)),
    )
