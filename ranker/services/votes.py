"""
Vote tally for profile comments.

``UserComment.votes`` is kept equal to the number of ``UserCommentVote``
rows for the comment. Every change to the vote rows and the matching
counter update are flushed on the same session, so they commit or roll back
together.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ranker.models.user_comment import UserComment, UserCommentVote

logger = logging.getLogger(__name__)


async def load_comment(db: AsyncSession, comment_id: int) -> Optional[UserComment]:
    """Load a profile comment with its author and votes."""
    result = await db.execute(
        select(UserComment)
        .options(selectinload(UserComment.user_votes), selectinload(UserComment.rater_user))
        .where(UserComment.id == comment_id)
    )
    return result.scalar_one_or_none()


def voters(comment: UserComment) -> List[int]:
    return [vote.user_id for vote in comment.user_votes]


async def toggle_vote(
    db: AsyncSession, comment: UserComment, user_id: int, remove: bool = False
) -> UserComment:
    """
    Add or remove ``user_id``'s upvote on ``comment``.

    Adding when a vote already exists, or removing when none does, leaves
    the comment untouched.
    """
    existing = next((v for v in comment.user_votes if v.user_id == user_id), None)

    if remove and existing:
        await db.delete(existing)
        await db.execute(
            update(UserComment)
            .where(UserComment.id == comment.id)
            .values(votes=UserComment.votes - 1)
        )
        logger.info(f"User {user_id} removed their vote on comment {comment.id}")
    elif not remove and not existing:
        db.add(UserCommentVote(user_id=user_id, user_comment_id=comment.id, value=1))
        await db.execute(
            update(UserComment)
            .where(UserComment.id == comment.id)
            .values(votes=UserComment.votes + 1)
        )
        logger.info(f"User {user_id} upvoted comment {comment.id}")
    else:
        return comment

    await db.flush()
    await db.refresh(comment, attribute_names=["votes", "user_votes", "updated_at"])
    return comment


async def reset_votes(db: AsyncSession, comment: UserComment, content: str) -> UserComment:
    """Replace a comment's text, dropping every vote and zeroing the counter."""
    for vote in list(comment.user_votes):
        await db.delete(vote)
    comment.content = content
    comment.votes = 0
    await db.flush()
    await db.refresh(comment, attribute_names=["votes", "user_votes", "updated_at"])
    logger.info(f"Comment {comment.id} was resubmitted; votes reset")
    return comment
