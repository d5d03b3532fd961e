"""
Review workflow: creation, filtering and peer approval of POS reviews.

A review starts pending and becomes approved once enough users other
than its author have approved it. The quorum comes from ApprovalPolicy.
"""

import logging
from typing import List, Optional

from pos_reviews.database import Review
from pos_reviews.exceptions import NotFoundError, ValidationError
from pos_reviews.policy import ApprovalPolicy
from pos_reviews.stores import PosStore, ReviewStore, UserStore


logger = logging.getLogger(__name__)


class ReviewService:
    """
    Service implementing the review lifecycle.

    Preconditions are checked in a fixed order and the first failing one
    is raised; nothing is written unless all of them pass.
    """

    def __init__(
        self,
        reviews: ReviewStore,
        users: UserStore,
        pos: PosStore,
        policy: ApprovalPolicy
    ):
        self.reviews = reviews
        self.users = users
        self.pos = pos
        self.policy = policy

    # =========================================================================
    # Workflow Operations
    # =========================================================================

    def create(self, review: Review) -> Review:
        """
        Persist a new review.

        Args:
            review: Candidate review with pos_id, author_id and text set

        Returns:
            The stored review, pending with zero approvals

        Raises:
            NotFoundError: The POS or the author does not exist
            ValidationError: The author already reviewed this POS, or the text is blank
        """
        logger.info(
            f"Preparing to create review for POS '{review.pos_id}' by '{review.author_id}'"
        )
        self.pos.get_by_id(review.pos_id)

        if self.reviews.find_by_pos_and_author(review.pos_id, review.author_id):
            logger.warning(
                f"User '{review.author_id}' already reviewed POS '{review.pos_id}'"
            )
            raise ValidationError("duplicate review")

        self.users.get_by_id(review.author_id)

        if not review.text or not review.text.strip():
            raise ValidationError("empty review")

        # approval fields are server-owned; client values are discarded
        new_review = Review(
            pos_id=review.pos_id,
            author_id=review.author_id,
            text=review.text,
            approval_count=0,
            approved=False,
        )
        return self.reviews.upsert(new_review)

    def filter(self, pos_id: int, approved: bool) -> List[Review]:
        """Return the reviews of a POS whose approval status equals `approved`."""
        self.pos.get_by_id(pos_id)
        return self.reviews.find_by_pos_and_approval(pos_id, approved)

    def approve(self, review_id: Optional[int], user_id: Optional[int]) -> Review:
        """
        Record one approval of a review by a user.

        The count is incremented on the stored review, not on any copy the
        caller holds. Approvals are not deduplicated per user: approving the
        same review twice counts twice.

        Args:
            review_id: Review to approve
            user_id: Approving user, must not be the author

        Returns:
            The updated review
        """
        logger.info(
            f"Processing approval request for review with ID '{review_id}' "
            f"by user with ID '{user_id}'..."
        )
        self._require_valid_user(user_id)

        if review_id is None:
            raise NotFoundError("Review", review_id)
        review = self.reviews.get_by_id(review_id)

        if review.author_id == user_id:
            logger.warning(f"User '{user_id}' tried to approve own review '{review_id}'")
            raise ValidationError("self-approval")

        was_approved = review.approved
        updated = self.reviews.increment_approval(review_id, self.policy)

        if updated.approved and not was_approved:
            logger.info(
                f"Review '{review_id}' reached {updated.approval_count} approvals "
                f"and is now approved"
            )
        return updated

    # =========================================================================
    # Pass-through CRUD
    # =========================================================================

    def get_all(self) -> List[Review]:
        return self.reviews.find_all()

    def get_by_id(self, review_id: int) -> Review:
        return self.reviews.get_by_id(review_id)

    def update_text(self, review_id: int, text: str) -> Review:
        """Replace the text of a review; approval state is left untouched."""
        review = self.reviews.get_by_id(review_id)
        if not text or not text.strip():
            raise ValidationError("empty review")
        review.text = text
        return self.reviews.upsert(review)

    def delete(self, review_id: int) -> None:
        review = self.reviews.get_by_id(review_id)
        logger.info(f"Deleting review with ID '{review_id}'")
        self.reviews.delete(review)

    # =========================================================================
    # Helper Functions
    # =========================================================================

    def _require_valid_user(self, user_id: Optional[int]):
        """Raise ValidationError unless user_id names an existing user."""
        if user_id is None:
            raise ValidationError("invalid user")
        try:
            self.users.get_by_id(user_id)
        except NotFoundError:
            logger.warning(f"Approval by unknown user '{user_id}' rejected")
            raise ValidationError("invalid user") from None
