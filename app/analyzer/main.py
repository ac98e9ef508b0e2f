"""
FastAPI application for the project document analyzer.

Provides endpoints for:
- Account registration and login
- Uploading project documents (PDF/Word)
- Analyzing documents with a remote language model
- Listing and deleting documents
"""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .database import init_db
from .models import HealthResponse
from .routers import auth, documents
from .services.ai import AnalysisRequester, UpstreamUnavailableError
from .services.exceptions import NotFoundError, ServiceValidationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Project Document Analyzer...")
    settings = get_settings()
    # Note: In production, use Alembic migrations instead of init_db()
    init_db()
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.state.analysis_requester = AnalysisRequester.from_settings(settings)
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down Project Document Analyzer...")


# Create FastAPI application
app = FastAPI(
    title="Project Document Analyzer API",
    description="Summarizes project documents with a language model",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(
        status="healthy",
        message="Project Document Analyzer API is running",
        version=__version__,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", message="Service is healthy", version=__version__)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(auth.router)
app.include_router(documents.router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(ServiceValidationError)
async def validation_error_handler(request: Request, exc: ServiceValidationError):
    """Handle business rule violations."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    """Handle missing or foreign documents."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(UpstreamUnavailableError)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError):
    """Handle language model failures."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
    )
