"""
Profile ratings router — users scoring users, self-rating included.

Endpoints:
    GET    /users/ratings?userId=  → ratings a user has received (cached)
    POST   /users/ratings          → create or overwrite the caller's rating
    DELETE /users/ratings/{id}     → remove a rating (rater or admin)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ranker.database import get_db
from ranker.models.user import User
from ranker.models.user_rating import UserRating
from ranker.routers.auth import can_moderate, require_user
from ranker.schemas.profile import UserRatingCreate, UserRatingList, UserRatingOut
from ranker.services.cache import TimeBoxedCache, avatar_key, get_cache, user_ratings_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/ratings", tags=["user ratings"])


@router.get("", response_model=UserRatingList)
async def list_user_ratings(
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    if not await db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    async def fetch():
        result = await db.execute(
            select(UserRating)
            .options(selectinload(UserRating.rater_user))
            .where(UserRating.rated_user_id == user_id)
            .order_by(desc(UserRating.created_at), desc(UserRating.id))
        )
        return {"ratings": [UserRatingOut.model_validate(r) for r in result.scalars().all()]}

    return await cache.get_or_fetch(user_ratings_key(user_id), fetch)


@router.post("", response_model=UserRatingOut)
async def rate_user(
    body: UserRatingCreate,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    """Create or overwrite the caller's rating of ``user_id`` (may be themselves)."""
    if not await db.get(User, body.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    result = await db.execute(
        select(UserRating)
        .options(selectinload(UserRating.rater_user))
        .where(
            UserRating.rated_user_id == body.user_id,
            UserRating.rater_user_id == current_user.id,
        )
    )
    rating = result.scalar_one_or_none()

    if rating:
        rating.score = body.score
    else:
        rating = UserRating(
            score=body.score,
            rated_user_id=body.user_id,
            rater_user_id=current_user.id,
            rater_user=current_user,
        )
        db.add(rating)

    await db.commit()
    logger.info(f"User {current_user.id} rated user {body.user_id}: {rating.score}")

    cache.invalidate(user_ratings_key(body.user_id), avatar_key(body.user_id))
    return rating


@router.delete("/{rating_id}")
async def delete_user_rating(
    rating_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    rating = await db.get(UserRating, rating_id)
    if not rating:
        raise HTTPException(status_code=404, detail="Rating not found")

    if not can_moderate(current_user, rating.rater_user_id):
        raise HTTPException(status_code=403, detail="You can only delete your own ratings")

    rated_user_id = rating.rated_user_id
    await db.delete(rating)
    await db.commit()

    logger.info(f"User {current_user.id} deleted user rating {rating_id}")
    cache.invalidate(user_ratings_key(rated_user_id), avatar_key(rated_user_id))
    return {"message": "Rating deleted successfully"}
