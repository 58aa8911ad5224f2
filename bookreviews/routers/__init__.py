"""
API Routers Package

Router Structure:
- reviews.py: /api/v1/reviews, /users/{id}/reviews, /books/{id}/rating
- interactions.py: likes and comments under /api/v1/reviews
- stats.py: /api/v1/stats/* reading statistics

Each router is imported and registered in main.py.
"""

from bookreviews.routers.interactions import router as interactions_router
from bookreviews.routers.reviews import router as reviews_router
from bookreviews.routers.stats import router as stats_router

__all__ = [
    "reviews_router",
    "interactions_router",
    "stats_router",
]
