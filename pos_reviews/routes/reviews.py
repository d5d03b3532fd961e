"""
API routes for reviews of points of sale.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pos_reviews.config import get_settings
from pos_reviews.database import get_db, Review
from pos_reviews.models import CreateReviewRequest, ReviewResponse, UpdateReviewRequest
from pos_reviews.policy import ApprovalPolicy
from pos_reviews.review_service import ReviewService
from pos_reviews.stores import SqlPosStore, SqlReviewStore, SqlUserStore


router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency building the review workflow on the request's session."""
    return ReviewService(
        reviews=SqlReviewStore(db),
        users=SqlUserStore(db),
        pos=SqlPosStore(db),
        policy=ApprovalPolicy.from_settings(get_settings()),
    )


# =============================================================================
# Get Reviews
# =============================================================================


@router.get("/", response_model=List[ReviewResponse])
def get_all_reviews(
    service: ReviewService = Depends(get_review_service)
) -> List[ReviewResponse]:
    """Get all reviews."""
    return [ReviewResponse.model_validate(r) for r in service.get_all()]


@router.get("/filter", response_model=List[ReviewResponse])
def filter_reviews(
    pos_id: int = Query(..., description="POS whose reviews to retrieve"),
    approved: bool = Query(..., description="Approval status to match"),
    service: ReviewService = Depends(get_review_service)
) -> List[ReviewResponse]:
    """Get the approved (or pending) reviews of a POS."""
    reviews = service.filter(pos_id, approved)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.get("/{review_id}", response_model=ReviewResponse)
def get_review(
    review_id: int,
    service: ReviewService = Depends(get_review_service)
) -> ReviewResponse:
    """Get a single review."""
    return ReviewResponse.model_validate(service.get_by_id(review_id))


# =============================================================================
# Create/Update/Delete Review
# =============================================================================


@router.post("/", response_model=ReviewResponse, status_code=201)
def create_review(
    request: CreateReviewRequest,
    service: ReviewService = Depends(get_review_service)
) -> ReviewResponse:
    """
    Review a point of sale.

    Each user can review a POS only once. New reviews start pending
    with no approvals.
    """
    review = service.create(Review(
        pos_id=request.pos_id,
        author_id=request.author_id,
        text=request.text,
    ))
    return ReviewResponse.model_validate(review)


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    request: UpdateReviewRequest,
    service: ReviewService = Depends(get_review_service)
) -> ReviewResponse:
    """Change the text of a review."""
    return ReviewResponse.model_validate(service.update_text(review_id, request.text))


@router.delete("/{review_id}", status_code=204)
def delete_review(
    review_id: int,
    service: ReviewService = Depends(get_review_service)
):
    """Delete a review."""
    service.delete(review_id)


# =============================================================================
# Approve Review
# =============================================================================


@router.post("/{review_id}/approve", response_model=ReviewResponse)
def approve_review(
    review_id: int,
    user_id: Optional[int] = Query(default=None, description="Approving user"),
    service: ReviewService = Depends(get_review_service)
) -> ReviewResponse:
    """
    Approve another user's review.

    Once a review collects the configured number of approvals it is
    marked approved. Authors cannot approve their own reviews.
    """
    return ReviewResponse.model_validate(service.approve(review_id, user_id))
