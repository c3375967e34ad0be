"""
Flight Track Log Converter - FastAPI Backend

Main application entry point and configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tracklog.api.tracklogs import router as tracklogs_router
from tracklog.services import converter


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


APP_NAME = "Flight Track Log Converter"
APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {APP_NAME} (feed error policy: {converter.ON_FEED_ERROR})")
    yield
    logger.info(f"Shutting down {APP_NAME}")


# Create FastAPI app
app = FastAPI(
    title=APP_NAME,
    description="""
    Converts flight-tracker exports into Garmin G1000 track logs.

    ## Features
    - Fetch FlightAware KML exports or accept inline GeoJSON feeds
    - Deduplicate timestamps and derive ground speed and heading
    - Concatenate several flights into one track log
    - Render the fixed-width G1000 CSV layout

    ## Data Flow
    1. POST /tracklogs with ident, model and ordered sources
    2. Read summary and CSV from the response, or
    3. POST /tracklogs/csv to download the file directly
    """,
    version=APP_VERSION,
    lifespan=lifespan,
)


# CORS middleware (allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(tracklogs_router)


@app.get("/")
async def root():
    """Root endpoint - basic health check."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "feed_error_policy": converter.ON_FEED_ERROR,
    }
