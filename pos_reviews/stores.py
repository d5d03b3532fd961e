"""
Entity stores used by the review workflow.

The workflow only depends on the Protocols below. The Sql* classes
implement them on top of a single SQLAlchemy session; every write
commits before returning.
"""

import logging
from datetime import datetime, UTC
from typing import List, Protocol

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pos_reviews.database import Pos, Review, User
from pos_reviews.exceptions import NotFoundError, ValidationError
from pos_reviews.policy import ApprovalPolicy


logger = logging.getLogger(__name__)


# =============================================================================
# Store Interfaces
# =============================================================================


class PosStore(Protocol):
    def get_by_id(self, pos_id: int) -> Pos: ...

    def find_all(self) -> List[Pos]: ...

    def add(self, pos: Pos) -> Pos: ...


class UserStore(Protocol):
    def get_by_id(self, user_id: int) -> User: ...

    def find_all(self) -> List[User]: ...

    def add(self, user: User) -> User: ...


class ReviewStore(Protocol):
    def get_by_id(self, review_id: int) -> Review: ...

    def find_all(self) -> List[Review]: ...

    def find_by_pos_and_author(self, pos_id: int, author_id: int) -> List[Review]: ...

    def find_by_pos_and_approval(self, pos_id: int, approved: bool) -> List[Review]: ...

    def upsert(self, review: Review) -> Review: ...

    def increment_approval(self, review_id: int, policy: ApprovalPolicy) -> Review:
        """
        Add one approval to the stored review and recompute `approved`.

        Must be atomic with respect to other increments of the same review.
        """
        ...

    def delete(self, review: Review) -> None: ...


# =============================================================================
# SQLAlchemy Stores
# =============================================================================


class SqlPosStore:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, pos_id: int) -> Pos:
        pos = self.db.get(Pos, pos_id)
        if pos is None:
            raise NotFoundError("POS", pos_id)
        return pos

    def find_all(self) -> List[Pos]:
        return self.db.query(Pos).order_by(Pos.id).all()

    def add(self, pos: Pos) -> Pos:
        self.db.add(pos)
        self.db.commit()
        self.db.refresh(pos)
        return pos


class SqlUserStore:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def find_all(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def add(self, user: User) -> User:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError(f"login name '{user.login_name}' is already taken")
        self.db.refresh(user)
        return user


class SqlReviewStore:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, review_id: int) -> Review:
        review = self.db.get(Review, review_id)
        if review is None:
            raise NotFoundError("Review", review_id)
        return review

    def find_all(self) -> List[Review]:
        return self.db.query(Review).order_by(Review.id).all()

    def find_by_pos_and_author(self, pos_id: int, author_id: int) -> List[Review]:
        return self.db.query(Review).filter(
            Review.pos_id == pos_id,
            Review.author_id == author_id
        ).order_by(Review.id).all()

    def find_by_pos_and_approval(self, pos_id: int, approved: bool) -> List[Review]:
        return self.db.query(Review).filter(
            Review.pos_id == pos_id,
            Review.approved == approved
        ).order_by(Review.id).all()

    def upsert(self, review: Review) -> Review:
        pos_id, author_id = review.pos_id, review.author_id
        if review.id is not None:
            review = self.db.merge(review)
        else:
            self.db.add(review)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # A concurrent request may have inserted the same (pos, author) pair
            if self.find_by_pos_and_author(pos_id, author_id):
                logger.warning(f"Unique constraint rejected review for POS '{pos_id}' by '{author_id}'")
                raise ValidationError("duplicate review")
            raise
        self.db.refresh(review)
        return review

    def increment_approval(self, review_id: int, policy: ApprovalPolicy) -> Review:
        # Both SET clauses see the pre-update approval_count, so the
        # increment and the quorum check happen in one statement.
        new_count = Review.approval_count + 1
        result = self.db.execute(
            update(Review)
            .where(Review.id == review_id)
            .values(
                approval_count=new_count,
                approved=policy.is_approved(new_count),
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("Review", review_id)
        self.db.commit()

        return self.db.get(Review, review_id, populate_existing=True)

    def delete(self, review: Review) -> None:
        self.db.delete(review)
        self.db.commit()
