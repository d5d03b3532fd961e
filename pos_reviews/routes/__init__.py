"""
Routes package for POS Reviews API.
"""

from pos_reviews.routes.pos import router as pos_router
from pos_reviews.routes.reviews import router as reviews_router
from pos_reviews.routes.users import router as users_router

__all__ = ["pos_router", "reviews_router", "users_router"]
