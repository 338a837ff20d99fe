"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from reservations.config import settings
from reservations.database import Base, SessionLocal, engine

# Import routers
from reservations.routers import auth, users, venues, bookings, change_requests, audit_logs, calendar, metrics

# Import all models so Base.metadata knows about them
from reservations.models.user import User                     # noqa: F401
from reservations.models.venue import Venue                   # noqa: F401
from reservations.models.booking import Booking               # noqa: F401
from reservations.models.audit_log import AuditLog            # noqa: F401
from reservations.models.change_request import ChangeRequest  # noqa: F401

from reservations import scheduler
from reservations.services.auth_service import ensure_bootstrap_admin
from reservations.services.identity import LocalIdentityProvider

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Facility Reservations",
    description="Venue booking requests, approvals, audit trail and notifications",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(problems) or "Invalid request"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server error"},
    )


# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(users.profile_router, prefix="/api/profile", tags=["Profile"])
app.include_router(venues.router, prefix="/api/venues", tags=["Venues"])
app.include_router(bookings.router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(change_requests.router, prefix="/api/change-requests", tags=["ChangeRequests"])
app.include_router(audit_logs.router, prefix="/api/audit-logs", tags=["AuditLogs"])
app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])
app.include_router(metrics.router, prefix="/api/metrics", tags=["Metrics"])


@app.on_event("startup")
def on_startup():
    """Create tables (SQLite dev mode), seed the first admin, start the reminder job."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        ensure_bootstrap_admin(db, LocalIdentityProvider(db))
    finally:
        db.close()

    if settings.REMINDER_SCHEDULER_ENABLED:
        scheduler.init_scheduler()


@app.on_event("shutdown")
def on_shutdown():
    scheduler.shutdown_scheduler()


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
