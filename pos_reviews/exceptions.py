"""
Errors raised by the review workflow and the entity stores.
"""

from typing import Any


class ReviewServiceError(Exception):
    """Base class for all workflow errors."""


class NotFoundError(ReviewServiceError):
    """A referenced POS, review or user does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID '{entity_id}' not found")


class ValidationError(ReviewServiceError):
    """A business rule rejected the request (duplicate, self-approval, ...)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
