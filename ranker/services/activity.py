"""
Activity feed — album ratings and album comments merged into one timeline.

The merge itself is pure (``merge_activity`` + ``paginate``). The fetch
helpers read each side with a window large enough that the merged page is
exact: the first ``skip + take`` items of the merged feed can only come from
the first ``skip + take`` items of either side.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ranker.models.comment import Comment, CommentStatus
from ranker.models.rating import Rating

logger = logging.getLogger(__name__)


class ActivityKind(str, enum.Enum):
    RATING = "rating"
    COMMENT = "comment"


class ActivityFilter(str, enum.Enum):
    ALL = "all"
    RATINGS = "ratings"
    COMMENTS = "comments"


@dataclass(frozen=True)
class ActivityItem:
    """One feed entry; ``payload`` shape depends on ``kind``."""

    kind: ActivityKind
    id: str
    created_at: datetime
    payload: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "created_at": self.created_at,
            "content": self.payload,
        }


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def merge_activity(
    ratings: Sequence[ActivityItem], comments: Sequence[ActivityItem]
) -> List[ActivityItem]:
    """Newest first; on equal timestamps ratings come before comments."""
    combined = list(ratings) + list(comments)
    return sorted(combined, key=lambda item: _as_utc(item.created_at), reverse=True)


def paginate(items: Sequence[ActivityItem], skip: int, take: int) -> List[ActivityItem]:
    skip = max(skip, 0)
    return list(items[skip:skip + max(take, 0)])


# ═══════════════════════════════════════════════════════════════
#  Row → item conversion
# ═══════════════════════════════════════════════════════════════

def _user_summary(user) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "image": user.image}


def _album_summary(album) -> Optional[Dict[str, Any]]:
    if album is None:
        return None
    return {
        "id": album.id,
        "name": album.name,
        "artist": album.artist,
        "image_url": album.image_url,
    }


def rating_item(rating: Rating) -> ActivityItem:
    return ActivityItem(
        kind=ActivityKind.RATING,
        id=f"rating-{rating.id}",
        created_at=rating.created_at,
        payload={
            "id": rating.id,
            "score": rating.score,
            "user_id": rating.user_id,
            "album_id": rating.album_id,
            "created_at": rating.created_at,
            "updated_at": rating.updated_at,
            "user": _user_summary(rating.user),
            "album": _album_summary(rating.album),
        },
    )


def comment_item(comment: Comment) -> ActivityItem:
    return ActivityItem(
        kind=ActivityKind.COMMENT,
        id=f"comment-{comment.id}",
        created_at=comment.created_at,
        payload={
            "id": comment.id,
            "content": comment.content,
            "status": comment.status.value,
            "user_id": comment.user_id,
            "album_id": comment.album_id,
            "created_at": comment.created_at,
            "updated_at": comment.updated_at,
            "user": _user_summary(comment.user),
            "album": _album_summary(comment.album),
        },
    )


# ═══════════════════════════════════════════════════════════════
#  Queries
# ═══════════════════════════════════════════════════════════════

async def _recent_ratings(
    db: AsyncSession, user_id: Optional[int], skip: int, take: int
) -> List[ActivityItem]:
    stmt = (
        select(Rating)
        .options(selectinload(Rating.user), selectinload(Rating.album))
        .order_by(desc(Rating.created_at), desc(Rating.id))
        .offset(skip)
        .limit(take)
    )
    if user_id is not None:
        stmt = stmt.where(Rating.user_id == user_id)
    result = await db.execute(stmt)
    return [rating_item(r) for r in result.scalars().all()]


async def _recent_comments(
    db: AsyncSession,
    user_id: Optional[int],
    skip: int,
    take: int,
    include_hidden: bool = False,
) -> List[ActivityItem]:
    stmt = (
        select(Comment)
        .options(selectinload(Comment.user), selectinload(Comment.album))
        .order_by(desc(Comment.created_at), desc(Comment.id))
        .offset(skip)
        .limit(take)
    )
    if user_id is not None:
        stmt = stmt.where(Comment.user_id == user_id)
    if not include_hidden:
        stmt = stmt.where(Comment.status == CommentStatus.VISIBLE)
    result = await db.execute(stmt)
    return [comment_item(c) for c in result.scalars().all()]


async def fetch_activity(
    db: AsyncSession,
    kind: ActivityFilter = ActivityFilter.ALL,
    skip: int = 0,
    take: int = 20,
    user_id: Optional[int] = None,
    include_hidden: bool = False,
) -> List[ActivityItem]:
    """
    Fetch one page of activity, globally or for ``user_id`` only.

    ``include_hidden`` lets hidden comments through; callers set it only
    when a user is looking at their own activity.
    """
    if kind is ActivityFilter.RATINGS:
        return await _recent_ratings(db, user_id, skip, take)
    if kind is ActivityFilter.COMMENTS:
        return await _recent_comments(db, user_id, skip, take, include_hidden)

    window = skip + take
    ratings = await _recent_ratings(db, user_id, 0, window)
    comments = await _recent_comments(db, user_id, 0, window, include_hidden)
    page = paginate(merge_activity(ratings, comments), skip, take)
    logger.debug(f"Merged {len(ratings)} ratings and {len(comments)} comments into a page of {len(page)}")
    return page
