"""
Reading Statistics Router

Endpoints:
- GET /stats/me - Statistics for the authenticated user
- GET /stats/users/{user_id} - Statistics for any user
"""

from fastapi import APIRouter

from bookreviews.dependencies import CurrentUserId, DbSession
from bookreviews.schemas.stats import ReadingStatsResponse
from bookreviews.services.responses import to_reading_stats_response
from bookreviews.services.stats import get_reading_stats

router = APIRouter(
    prefix="/stats",
    tags=["Statistics"],
    responses={
        404: {"description": "User not found"},
    },
)


def _reading_stats(db: DbSession, user_id: int) -> ReadingStatsResponse:
    stats = get_reading_stats(db, user_id)
    return to_reading_stats_response(
        stats.counts,
        stats.rating_stats,
        stats.top_genres,
        stats.trends,
    )


@router.get(
    "/me",
    response_model=ReadingStatsResponse,
    summary="Get my reading statistics",
)
def my_reading_stats(
    db: DbSession,
    current_user_id: CurrentUserId,
) -> ReadingStatsResponse:
    """
    Reading statistics for the authenticated user.

    Includes shelf counts, rating histogram, top genres and this
    month's / this year's activity.
    """
    return _reading_stats(db, current_user_id)


@router.get(
    "/users/{user_id}",
    response_model=ReadingStatsResponse,
    summary="Get a user's reading statistics",
)
def user_reading_stats(
    user_id: int,
    db: DbSession,
) -> ReadingStatsResponse:
    return _reading_stats(db, user_id)
