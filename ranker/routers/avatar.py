"""Avatar router — profile header data: name, image, rating summary, flairs."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ranker.database import get_db
from ranker.models.user import User
from ranker.models.user_rating import UserRating
from ranker.routers.auth import get_current_user
from ranker.schemas.user import AvatarOut
from ranker.services.aggregation import average_score, display_score
from ranker.services.cache import TimeBoxedCache, avatar_key, get_cache
from ranker.services.flairs import load_flairs

router = APIRouter(prefix="/users/avatar", tags=["avatar"])


async def build_avatar(db: AsyncSession, user: User) -> dict:
    result = await db.execute(
        select(UserRating.score).where(UserRating.rated_user_id == user.id)
    )
    scores = result.scalars().all()

    return {
        "id": user.id,
        "name": user.name,
        "image": user.image,
        "average_rating": display_score(average_score(scores)) if scores else None,
        "rating_count": len(scores),
        "flairs": await load_flairs(db, user.id),
    }


@router.get("", response_model=AvatarOut)
async def get_avatar(
    user_id: Optional[int] = Query(None, alias="userId"),
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    """Avatar data for ``userId``, or for the caller when it is omitted."""
    if user_id is None:
        if not current_user:
            raise HTTPException(status_code=401, detail="Authentication required")
        user_id = current_user.id

    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return await cache.get_or_fetch(avatar_key(user.id), lambda: build_avatar(db, user))
