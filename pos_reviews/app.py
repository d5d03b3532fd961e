"""
POS Reviews API Service - FastAPI Application.

REST API for reviewing points of sale and approving peers' reviews.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_reviews.config import get_settings
from pos_reviews.database import get_db, init_db, Review
from pos_reviews.exceptions import NotFoundError, ValidationError
from pos_reviews.models import HealthResponse
from pos_reviews.routes import pos_router, reviews_router, users_router


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting POS Reviews API Service...")
    init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down POS Reviews API Service...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
## POS Reviews API

Users review points of sale (POS) and approve each other's reviews.

### API Flow

1. A user reviews a POS (POST /reviews) - one review per user and POS
2. Other users approve the review (POST /reviews/{id}/approve)
3. After enough approvals the review is approved
4. Trusted reviews are listed per POS (GET /reviews/filter?pos_id=..&approved=true)
    """,
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
origins = settings.allowed_origins.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Map workflow errors to HTTP responses
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


# Include routers
app.include_router(pos_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(reviews_router, prefix="/api")


# Root endpoint
@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Reviews and peer approval for points of sale",
        "docs_url": "/docs",
        "openapi_url": "/openapi.json",
        "approval_min_count": settings.approval_min_count,
        "endpoints": {
            "pos": "/api/pos",
            "users": "/api/users",
            "reviews": "/api/reviews",
            "health": "/health",
        }
    }


@app.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns service health status and basic statistics.
    """
    try:
        # Test database connection
        db.execute(text("SELECT 1"))
        db_connected = True
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        db_connected = False

    reviews_count = 0
    approved_count = 0
    if db_connected:
        reviews_count = db.query(func.count(Review.id)).scalar() or 0
        approved_count = db.query(func.count(Review.id)).filter(
            Review.approved
        ).scalar() or 0

    return HealthResponse(
        status="healthy" if db_connected else "degraded",
        version=settings.app_version,
        database_connected=db_connected,
        reviews_count=reviews_count,
        approved_reviews_count=approved_count
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pos_reviews.app:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.debug
    )
