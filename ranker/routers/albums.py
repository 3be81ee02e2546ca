"""
Albums router — catalog import, listing, tier list, album page, removal.

Endpoints:
    GET    /albums            → every album with its ratings (cached, filterable)
    GET    /albums/tiers      → rated albums bucketed S..F (cached)
    GET    /albums/{album_id} → album with tracks, ratings and comments
    POST   /albums            → import an album from Spotify by id
    DELETE /albums/{album_id} → remove an album (adder or admin)
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ranker.database import get_db
from ranker.models.album import Album, Track
from ranker.models.comment import Comment, CommentStatus
from ranker.models.rating import Rating
from ranker.models.user import User
from ranker.routers.auth import can_moderate, get_current_user, require_user
from ranker.schemas.album import AlbumCreate, AlbumDetailOut, AlbumOut, CommentOut, RatingOut, TierGroupOut, TrackOut
from ranker.services.aggregation import average_score, display_score, filter_albums, group_by_tier
from ranker.services.cache import ALBUMS_KEY, TIERLIST_KEY, TimeBoxedCache, get_cache
from ranker.services.spotify import SpotifyCatalog, album_fields, get_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/albums", tags=["albums"])


# ═══════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════

def album_to_dict(album: Album) -> Dict[str, Any]:
    """Album list entry; expects ``ratings`` (and each rating's user) loaded."""
    ratings = [RatingOut.model_validate(r).model_dump() for r in album.ratings]
    return {
        "id": album.id,
        "spotify_id": album.spotify_id,
        "name": album.name,
        "artist": album.artist,
        "image_url": album.image_url,
        "release_date": album.release_date,
        "added_by_id": album.added_by_id,
        "created_at": album.created_at,
        "ratings": ratings,
        "rating_count": len(ratings),
        "average_rating": display_score(average_score(ratings)) if ratings else None,
    }


def with_rating(album: Dict[str, Any], rating: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``album`` with ``rating`` inserted or replacing the same user's rating."""
    ratings = [r for r in album["ratings"] if r["user_id"] != rating["user_id"]]
    ratings.append(rating)
    return {
        **album,
        "ratings": ratings,
        "rating_count": len(ratings),
        "average_rating": display_score(average_score(ratings)),
    }


async def load_albums(db: AsyncSession) -> List[Dict[str, Any]]:
    """Every album, newest first, with ratings and raters."""
    result = await db.execute(
        select(Album)
        .options(selectinload(Album.ratings).selectinload(Rating.user))
        .order_by(desc(Album.created_at), desc(Album.id))
    )
    return [album_to_dict(a) for a in result.scalars().all()]


async def _load_album_detail(db: AsyncSession, album_id: int) -> Optional[Album]:
    result = await db.execute(
        select(Album)
        .options(
            selectinload(Album.tracks),
            selectinload(Album.ratings).selectinload(Rating.user),
            selectinload(Album.comments).selectinload(Comment.user),
        )
        .where(Album.id == album_id)
    )
    return result.scalar_one_or_none()


# ═══════════════════════════════════════════════════════════════
#  Reads
# ═══════════════════════════════════════════════════════════════

@router.get("", response_model=List[AlbumOut])
async def list_albums(
    search: str = "",
    artist: str = "",
    min_rating: float = Query(0, ge=0, le=10),
    max_rating: float = Query(10, ge=0, le=10),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    """List albums (newest first), optionally filtered by text, artist or mean rating."""
    albums = await cache.get_or_fetch(ALBUMS_KEY, lambda: load_albums(db))
    return filter_albums(albums, search, artist, min_rating, max_rating)


@router.get("/tiers", response_model=List[TierGroupOut])
async def tier_list(
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    """Rated albums bucketed into tiers by their unrounded mean."""

    async def fetch():
        albums = await cache.get_or_fetch(ALBUMS_KEY, lambda: load_albums(db))
        return group_by_tier(albums)

    return await cache.get_or_fetch(TIERLIST_KEY, fetch)


@router.get("/{album_id}", response_model=AlbumDetailOut)
async def get_album(
    album_id: int,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Album page. Hidden comments are shown to their author only."""
    album = await _load_album_detail(db, album_id)
    if not album:
        raise HTTPException(status_code=404, detail="Album not found")

    viewer_id = current_user.id if current_user else None
    comments = sorted(
        (
            c for c in album.comments
            if c.status == CommentStatus.VISIBLE or c.user_id == viewer_id
        ),
        key=lambda c: c.created_at,
        reverse=True,
    )

    return {
        **album_to_dict(album),
        "tracks": [TrackOut.model_validate(t) for t in album.tracks],
        "comments": [CommentOut.model_validate(c) for c in comments],
    }


# ═══════════════════════════════════════════════════════════════
#  Writes
# ═══════════════════════════════════════════════════════════════

@router.post("", response_model=AlbumDetailOut, status_code=status.HTTP_201_CREATED)
async def create_album(
    body: AlbumCreate,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
    catalog: SpotifyCatalog = Depends(get_catalog),
):
    """Import an album and its tracks from Spotify."""
    result = await db.execute(select(Album).where(Album.spotify_id == body.spotify_id))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Album already exists")

    fields = album_fields(await catalog.fetch_album(body.spotify_id))
    tracks = [Track(**t) for t in fields.pop("tracks")]

    album = Album(
        **fields,
        added_by_id=current_user.id,
        tracks=tracks,
        ratings=[],
        comments=[],
    )
    db.add(album)
    await db.commit()

    logger.info(f"User {current_user.id} imported album {album.id} ({album.name} — {album.artist})")

    entry = album_to_dict(album)
    cache.patch(ALBUMS_KEY, lambda albums: [entry] + albums)

    return {
        **entry,
        "tracks": [TrackOut.model_validate(t) for t in sorted(album.tracks, key=lambda t: t.number)],
        "comments": [],
    }


@router.delete("/{album_id}")
async def delete_album(
    album_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    """Delete an album together with its tracks, ratings and comments."""
    album = await _load_album_detail(db, album_id)
    if not album:
        raise HTTPException(status_code=404, detail="Album not found")

    if not can_moderate(current_user, album.added_by_id):
        raise HTTPException(status_code=403, detail="Only the user who added this album can delete it")

    await db.delete(album)
    await db.commit()

    logger.info(f"User {current_user.id} deleted album {album_id}")

    cache.patch(ALBUMS_KEY, lambda albums: [a for a in albums if a["id"] != album_id])
    cache.invalidate(TIERLIST_KEY)
    return {"message": "Album deleted successfully"}
