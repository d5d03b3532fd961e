"""
Shared fixtures: in-memory stores for workflow tests and an in-memory
SQLite database for store and API tests.
"""

import os
import threading
from datetime import datetime, UTC

# Must be set before pos_reviews creates its engine and settings
os.environ["POSR_DATABASE_URL"] = "sqlite://"
os.environ["POSR_APPROVAL_MIN_COUNT"] = "3"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pos_reviews.app import app
from pos_reviews.database import Base, Pos, User, enable_sqlite_foreign_keys, get_db
from pos_reviews.exceptions import NotFoundError, ValidationError
from pos_reviews.policy import ApprovalPolicy
from pos_reviews.review_service import ReviewService


# =============================================================================
# In-memory Stores
# =============================================================================


class InMemoryPosStore:
    def __init__(self, pos_ids=()):
        self.items = {pos_id: Pos(id=pos_id, name=f"POS {pos_id}") for pos_id in pos_ids}

    def get_by_id(self, pos_id):
        if pos_id not in self.items:
            raise NotFoundError("POS", pos_id)
        return self.items[pos_id]

    def find_all(self):
        return list(self.items.values())

    def add(self, pos):
        pos.id = max(self.items, default=0) + 1
        self.items[pos.id] = pos
        return pos


class InMemoryUserStore:
    def __init__(self, user_ids=()):
        self.items = {user_id: User(id=user_id, login_name=f"user{user_id}") for user_id in user_ids}

    def get_by_id(self, user_id):
        if user_id not in self.items:
            raise NotFoundError("User", user_id)
        return self.items[user_id]

    def find_all(self):
        return list(self.items.values())

    def add(self, user):
        user.id = max(self.items, default=0) + 1
        self.items[user.id] = user
        return user


class InMemoryReviewStore:
    """Thread-safe review store that counts writes."""

    def __init__(self):
        self.items = {}
        self.writes = 0
        self._lock = threading.Lock()
        self._next_id = 1

    def get_by_id(self, review_id):
        with self._lock:
            if review_id not in self.items:
                raise NotFoundError("Review", review_id)
            return self.items[review_id]

    def find_all(self):
        with self._lock:
            return list(self.items.values())

    def find_by_pos_and_author(self, pos_id, author_id):
        with self._lock:
            return [
                r for r in self.items.values()
                if r.pos_id == pos_id and r.author_id == author_id
            ]

    def find_by_pos_and_approval(self, pos_id, approved):
        with self._lock:
            return [
                r for r in self.items.values()
                if r.pos_id == pos_id and r.approved == approved
            ]

    def upsert(self, review):
        with self._lock:
            now = datetime.now(UTC)
            if review.id is None:
                if any(
                    r.pos_id == review.pos_id and r.author_id == review.author_id
                    for r in self.items.values()
                ):
                    raise ValidationError("duplicate review")
                review.id = self._next_id
                self._next_id += 1
                review.created_at = now
            review.updated_at = now
            self.items[review.id] = review
            self.writes += 1
            return review

    def increment_approval(self, review_id, policy):
        with self._lock:
            if review_id not in self.items:
                raise NotFoundError("Review", review_id)
            review = self.items[review_id]
            review.approval_count += 1
            review.approved = policy.is_approved(review.approval_count)
            review.updated_at = datetime.now(UTC)
            self.writes += 1
            return review

    def delete(self, review):
        with self._lock:
            del self.items[review.id]
            self.writes += 1


@pytest.fixture
def review_store():
    return InMemoryReviewStore()


@pytest.fixture
def user_store():
    return InMemoryUserStore(user_ids=[1, 2, 3, 4, 5])


@pytest.fixture
def pos_store():
    return InMemoryPosStore(pos_ids=[7, 8])


@pytest.fixture
def service(review_store, user_store, pos_store):
    """Workflow with a quorum of three approvals."""
    return ReviewService(review_store, user_store, pos_store, ApprovalPolicy(min_count=3))


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
