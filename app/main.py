"""
Alumni Mentorship Platform - Main Application

FastAPI backend with:
- MongoDB for members, assignments, meeting schedules and statuses
- Meeting status engine with phase-scoped upserts
- Approval gate for reviewer verdicts

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.exceptions import MentorshipError, PersistenceError
from app.core.logging import configure_logging
from app.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Alumni Mentorship Platform",
    description="""
    Mentor/mentee meeting tracking for the alumni engagement platform.

    ## Features
    - **Lookups**: Mentor's assigned mentees, mentee by email
    - **Meeting Status**: Phase-scoped status per meeting occurrence and mentee
    - **Approval**: Admin/coordinator verdicts on status records
    - **Schedules**: Meeting series with one meeting_id per date
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# ============================================================
# ERROR HANDLERS
# ============================================================

def _server_error(detail: str) -> JSONResponse:
    body = {"message": "Server error", "success": False}
    if settings.is_development and detail:
        body["error"] = detail
    return JSONResponse(status_code=500, content=body)


@app.exception_handler(MentorshipError)
async def mentorship_error_handler(request: Request, exc: MentorshipError):
    if isinstance(exc, PersistenceError):
        return _server_error(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "success": False},
    )


@app.exception_handler(PyMongoError)
async def mongo_error_handler(request: Request, exc: PyMongoError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _server_error(str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "message": "Validation error",
            "success": False,
            "errors": jsonable_encoder(exc.errors()),
        },
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
