"""
Approval quorum policy.
"""

from dataclasses import dataclass

from pos_reviews.config import Settings


@dataclass(frozen=True)
class ApprovalPolicy:
    """Minimum number of approvals a review needs to become approved."""

    min_count: int

    def __post_init__(self):
        if self.min_count < 1:
            raise ValueError(f"min_count must be at least 1, got {self.min_count}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApprovalPolicy":
        return cls(min_count=settings.approval_min_count)

    def is_approved(self, approval_count):
        """
        Check whether an approval count reaches the quorum.

        Works for plain integers and for SQLAlchemy column expressions,
        so stores can evaluate the rule inside an UPDATE statement.
        """
        return approval_count >= self.min_count
