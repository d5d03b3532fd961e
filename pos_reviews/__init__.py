"""
POS Reviews API Service.

Users review points of sale (POS) and peers approve those reviews.
Once a review collects enough approvals it becomes publicly trusted.

The service allows users to:
- Submit one review per POS
- Approve reviews written by other users
- List the approved (or still pending) reviews of a POS
"""

__version__ = "0.1.0"
