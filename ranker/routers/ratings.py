"""Album ratings router — one score per user per album, resubmission overwrites."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ranker.database import get_db
from ranker.models.album import Album
from ranker.models.rating import Rating
from ranker.models.user import User
from ranker.routers.albums import with_rating
from ranker.routers.auth import require_user
from ranker.schemas.album import RatingCreate, RatingOut
from ranker.services.cache import ALBUMS_KEY, TIERLIST_KEY, TimeBoxedCache, get_cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", response_model=RatingOut)
async def rate_album(
    body: RatingCreate,
    response: Response,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    """Create or overwrite the caller's rating of an album."""
    album = await db.get(Album, body.album_id)
    if not album:
        raise HTTPException(status_code=404, detail="Album not found")

    result = await db.execute(
        select(Rating)
        .options(selectinload(Rating.user))
        .where(Rating.user_id == current_user.id, Rating.album_id == body.album_id)
    )
    rating = result.scalar_one_or_none()

    if rating:
        rating.score = body.score
    else:
        rating = Rating(
            score=body.score,
            user_id=current_user.id,
            album_id=body.album_id,
            user=current_user,
        )
        db.add(rating)
        response.status_code = status.HTTP_201_CREATED

    await db.commit()
    logger.info(f"User {current_user.id} rated album {album.id}: {rating.score}")

    out = RatingOut.model_validate(rating)
    cache.patch(
        ALBUMS_KEY,
        lambda albums: [
            with_rating(a, out.model_dump()) if a["id"] == album.id else a for a in albums
        ],
    )
    cache.invalidate(TIERLIST_KEY)
    return out
