"""
Album comments router.

Endpoints:
    POST /comments               → comment on an album
    PUT  /comments/{comment_id}  → hide a comment (author or admin)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ranker.database import get_db
from ranker.models.album import Album
from ranker.models.comment import Comment, CommentStatus
from ranker.models.user import User
from ranker.routers.auth import can_moderate, require_user
from ranker.schemas.album import CommentCreate, CommentOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentOut)
async def create_comment(
    body: CommentCreate,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    album = await db.get(Album, body.album_id)
    if not album:
        raise HTTPException(status_code=404, detail="Album not found")

    comment = Comment(
        content=body.content,
        user_id=current_user.id,
        album_id=album.id,
        user=current_user,
    )
    db.add(comment)
    await db.commit()

    logger.info(f"User {current_user.id} commented on album {album.id}")
    return comment


@router.put("/{comment_id}", response_model=CommentOut)
async def hide_comment(
    comment_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete: the comment stays stored but drops out of public listings."""
    result = await db.execute(
        select(Comment).options(selectinload(Comment.user)).where(Comment.id == comment_id)
    )
    comment = result.scalar_one_or_none()
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")

    if not can_moderate(current_user, comment.user_id):
        raise HTTPException(status_code=403, detail="Unauthorized to update this comment")

    comment.status = CommentStatus.HIDDEN
    await db.commit()

    logger.info(f"User {current_user.id} hid comment {comment.id}")
    return comment
