"""
Pydantic models for POS Reviews API requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# Request Models
# =============================================================================


class CreateReviewRequest(BaseModel):
    """Request to review a point of sale."""

    pos_id: int = Field(..., description="ID of the POS being reviewed")
    author_id: int = Field(..., description="User ID of the review author")
    # Blank text is rejected by the workflow, after the POS and duplicate checks
    text: str = Field(..., description="Review content")


class UpdateReviewRequest(BaseModel):
    """Request to change the text of an existing review."""

    text: str = Field(..., description="New review content")


class CreatePosRequest(BaseModel):
    """Request to register a point of sale."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class CreateUserRequest(BaseModel):
    """Request to register a user."""

    login_name: str = Field(..., min_length=1, max_length=100)


# =============================================================================
# Response Models
# =============================================================================


class ReviewResponse(BaseModel):
    """Response containing a single review."""

    id: int
    pos_id: int
    author_id: int
    text: str

    approval_count: int = 0
    approved: bool = False

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PosResponse(BaseModel):
    """Response containing a single POS."""

    id: int
    name: str
    description: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """Response containing a single user."""

    id: int
    login_name: str

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    database_connected: bool
    reviews_count: int = 0
    approved_reviews_count: int = 0
