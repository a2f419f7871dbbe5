"""SafeLink Server - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from safelink.config import settings
from safelink.database import init_db
from safelink.errors import SafeLinkError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize logging, database and notification worker on startup."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    from safelink.services.notification_service import notification_worker
    notification_worker.start()

    yield

    notification_worker.stop()


app = FastAPI(
    title="SafeLink",
    description="Device pairing and location sharing for crash detection",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS - mobile clients connect from anywhere
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handlers: every failure becomes {"error": message} ---

@app.exception_handler(SafeLinkError)
async def safelink_error_handler(request: Request, exc: SafeLinkError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    missing = [str(err["loc"][-1]) for err in exc.errors() if err["type"] == "missing"]
    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    else:
        message = "; ".join(
            f"{err['loc'][-1]}: {err['msg']}" for err in exc.errors()
        ) or "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    message = str(getattr(exc, "orig", None) or exc)
    return JSONResponse(status_code=500, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


# --- Register API routers ---
from safelink.api.pairing import router as pairing_router  # noqa: E402
from safelink.api.devices import router as devices_router  # noqa: E402
from safelink.api.codes import router as codes_router  # noqa: E402
from safelink.api.users import router as users_router  # noqa: E402
from safelink.api.notifications import router as notifications_router  # noqa: E402
from safelink.api.system import router as system_router  # noqa: E402

API_PREFIX = "/api"

app.include_router(pairing_router, prefix=API_PREFIX)
app.include_router(devices_router, prefix=API_PREFIX)
app.include_router(codes_router, prefix=API_PREFIX)
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(notifications_router, prefix=API_PREFIX)
app.include_router(system_router, prefix=API_PREFIX)


@app.get("/")
def root():
    """Server info."""
    return {
        "name": settings.server_name,
        "version": "0.1.0",
        "status": "running",
    }
