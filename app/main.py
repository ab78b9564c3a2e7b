"""
Employee Management Service - Main Application Entry Point.

This service manages employee records including:
- Create/update of employee records in the system of record
- Kafka change events for every successful write
- An Elasticsearch index of employee documents with filtered search
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes.employees import router as employees_router
from app.core.config import settings
from app.core.database import create_db_and_tables
from app.core.employee_index import employee_index_service
from app.core.exceptions import EmployeeServiceError
from app.core.kafka import KafkaProducer
from app.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Employee Management Service...")

    logger.info("Creating database and tables...")
    create_db_and_tables()
    logger.info("Database and tables created successfully")

    logger.info("Initializing Kafka producer...")
    await KafkaProducer.start()
    logger.info("Kafka producer initialized")

    logger.info("Ensuring search index exists...")
    result = await employee_index_service.ensure_index()
    if result.ok:
        logger.info("Search index ready")
    else:
        logger.warning("Search index unavailable, document search will fail")

    logger.info("Employee Management Service startup complete")

    yield

    # Shutdown
    logger.info("Employee Management Service shutting down...")

    logger.info("Stopping Kafka producer...")
    await KafkaProducer.stop()
    logger.info("Kafka producer stopped")

    logger.info("Employee Management Service shutdown complete")


# Initialize FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Employee Management Service for HRMS - Employee records, change events and search",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.exception_handler(EmployeeServiceError)
async def employee_service_error_handler(_: Request, exc: EmployeeServiceError):
    """Render domain errors with their mapped status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(employees_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint for container orchestration and monitoring.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/ready", tags=["health"])
async def readiness_check():
    """
    Readiness check endpoint for Kubernetes.
    Verifies that the service is ready to accept traffic.
    """
    kafka_ready = KafkaProducer.get_producer() is not None

    return {
        "status": "ready" if kafka_ready else "not_ready",
        "checks": {
            "kafka_producer": "ok" if kafka_ready else "error",
        },
    }


@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint with service information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }
