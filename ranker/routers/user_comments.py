"""
Profile comments router — short notes left on a user's profile, with upvotes.

Endpoints:
    GET    /users/comments?userId=      → comments on a profile + who upvoted (cached)
    POST   /users/comments              → create, or replace the caller's comment
    DELETE /users/comments/{id}         → delete own comment
    POST   /users/comments/{id}/upvote  → add ({"remove": false}) or remove a vote
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ranker.database import get_db
from ranker.models.user import User
from ranker.models.user_comment import UserComment
from ranker.routers.auth import require_user
from ranker.schemas.profile import UpvoteRequest, UserCommentCreate, UserCommentList, UserCommentOut
from ranker.schemas.user import UserSummary
from ranker.services import votes
from ranker.services.cache import TimeBoxedCache, avatar_key, get_cache, user_comments_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/comments", tags=["user comments"])


def comment_to_dict(comment: UserComment) -> Dict[str, Any]:
    """Serialize a comment whose ``rater_user`` and ``user_votes`` are loaded."""
    return {
        "id": comment.id,
        "content": comment.content,
        "votes": comment.votes,
        "rater_user_id": comment.rater_user_id,
        "rated_user_id": comment.rated_user_id,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
        "rater_user": UserSummary.model_validate(comment.rater_user) if comment.rater_user else None,
        "upvoted_by": votes.voters(comment),
    }


def _invalidate_profile(cache: TimeBoxedCache, user_id: int) -> None:
    cache.invalidate(user_comments_key(user_id), avatar_key(user_id))


@router.get("", response_model=UserCommentList)
async def list_user_comments(
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    if not await db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    async def fetch():
        result = await db.execute(
            select(UserComment)
            .options(selectinload(UserComment.rater_user), selectinload(UserComment.user_votes))
            .where(UserComment.rated_user_id == user_id)
            .order_by(desc(UserComment.created_at), desc(UserComment.id))
        )
        return {"comments": [comment_to_dict(c) for c in result.scalars().all()]}

    return await cache.get_or_fetch(user_comments_key(user_id), fetch)


@router.post("", response_model=UserCommentOut)
async def upsert_user_comment(
    body: UserCommentCreate,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    """One comment per author per profile; resubmitting wipes its votes."""
    if not await db.get(User, body.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    result = await db.execute(
        select(UserComment)
        .options(selectinload(UserComment.rater_user), selectinload(UserComment.user_votes))
        .where(
            UserComment.rated_user_id == body.user_id,
            UserComment.rater_user_id == current_user.id,
        )
    )
    comment = result.scalar_one_or_none()

    if comment:
        comment = await votes.reset_votes(db, comment, body.content)
    else:
        comment = UserComment(
            content=body.content,
            rated_user_id=body.user_id,
            rater_user_id=current_user.id,
            votes=0,
            rater_user=current_user,
            user_votes=[],
        )
        db.add(comment)

    await db.commit()
    logger.info(f"User {current_user.id} commented on profile {body.user_id}")

    _invalidate_profile(cache, body.user_id)
    return comment_to_dict(comment)


@router.delete("/{comment_id}")
async def delete_user_comment(
    comment_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    comment = await votes.load_comment(db, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")

    if comment.rater_user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Unauthorized to delete this comment")

    rated_user_id = comment.rated_user_id
    await db.delete(comment)
    await db.commit()

    logger.info(f"User {current_user.id} deleted profile comment {comment_id}")
    _invalidate_profile(cache, rated_user_id)
    return {"success": True}


@router.post("/{comment_id}/upvote", response_model=UserCommentOut)
async def upvote_user_comment(
    comment_id: int,
    body: Optional[UpvoteRequest] = None,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    cache: TimeBoxedCache = Depends(get_cache),
):
    comment = await votes.load_comment(db, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")

    before = comment.votes
    remove = body.remove if body else False
    comment = await votes.toggle_vote(db, comment, current_user.id, remove=remove)
    await db.commit()

    if comment.votes != before:
        _invalidate_profile(cache, comment.rated_user_id)
    return comment_to_dict(comment)
