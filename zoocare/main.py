"""
ZooCare Records API - Main Application

Record keeping and reporting backend for an animal-care facility:
animals, diets, feed items, locations and medical records, plus
daily feed cost and diet health reports.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zoocare.core.app_logging import configure_logging
from zoocare.core.config import settings
from zoocare.core.database import Base, engine
from zoocare.api import animals, diets, feed_items, locations, medical, reports, species

configure_logging()

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## ZooCare Records API

    Track animals, their diets and their medical history.

    ### Features
    - Species, diet, feed item and animal records
    - Daily feed cost per animal and per feed item
    - Diet health score (weighted nutrient composite)
    - Live animal locations
    - Medical exams, diagnostic results and file uploads with tracking IDs

    ### Core Endpoints
    - `/api/animals` - Manage animal profiles
    - `/api/diets`, `/api/feeditems`, `/api/species` - Reference data
    - `/api/reports/daily-feed-cost`, `/api/reports/diet-health` - Reports
    - `/api/medical/...` - Medical records
    """,
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(species.router)
app.include_router(diets.router)
app.include_router(feed_items.router)
app.include_router(animals.router)
app.include_router(reports.router)
app.include_router(locations.router)
app.include_router(medical.router)


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "animals": "/api/animals",
            "diets": "/api/diets",
            "feed_items": "/api/feeditems",
            "species": "/api/species",
            "reports": "/api/reports",
            "locations": "/api/locations/live",
            "medical": "/api/medical",
        }
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
