"""
Main FastAPI application for the Presensi attendance service
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
import logging
import logging.config

from presensi.config import settings
from presensi.database import Base, engine as default_engine
from presensi import models  # noqa: F401

# Import API routes
from presensi.api import activity, attendance, clock, profile, sliks

from presensi.services.attendance_service import AttendanceService
from presensi.services.location_service import ReverseGeocoder
from presensi.services.record_store import RecordStore, SqlRecordStore

# Configure logging
logging.config.dictConfig(settings.get_logging_config())
logger = logging.getLogger(__name__)


def create_app(engine=None, geocoder: ReverseGeocoder = None, store: RecordStore = None) -> FastAPI:
    """
    Build the application.

    Args:
        engine: SQLAlchemy engine, defaults to the configured database
        geocoder: reverse geocoder for clock-in locations
        store: record store, defaults to a SQL store on `engine`
    """
    engine = engine or default_engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize application on startup"""
        logger.info("Starting Presensi")

        missing = settings.validate_required_settings()
        if missing:
            logger.warning(f"Missing or default settings: {', '.join(missing)}")

        # In production, use Alembic migrations instead
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables initialized")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")

        yield

        logger.info("Shutting down Presensi")

    if store is None:
        store = SqlRecordStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    if geocoder is None and settings.ENABLE_REVERSE_GEOCODING:
        geocoder = ReverseGeocoder()

    app = FastAPI(
        title="Presensi",
        description="Attendance, leave requests and SLIK intake for field staff",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_tags=[
            {
                "name": "attendance",
                "description": "Clock-in, clock-out, leave requests and history",
            },
            {
                "name": "activity",
                "description": "Combined attendance and SLIK activity feed",
            },
            {
                "name": "sliks",
                "description": "KTP data intake for SLIK checks",
            },
            {
                "name": "profile",
                "description": "Profile of the signed-in user",
            },
            {
                "name": "clock",
                "description": "Live clock feed",
            },
        ]
    )

    app.state.engine = engine
    app.state.store = store
    app.state.attendance_service = AttendanceService(store, geocoder)

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint
    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint for monitoring"""
        try:
            with request.app.state.engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            return {
                "status": "healthy",
                "database": "connected",
                "version": "1.0.0"
            }
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            raise HTTPException(status_code=503, detail="Service unavailable")

    app.include_router(attendance.router, prefix=settings.API_PREFIX)
    app.include_router(activity.router, prefix=settings.API_PREFIX)
    app.include_router(sliks.router, prefix=settings.API_PREFIX)
    app.include_router(profile.router, prefix=settings.API_PREFIX)
    app.include_router(clock.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    # Development server
    uvicorn.run(
        "presensi.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
