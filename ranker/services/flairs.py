"""
Profile flair derivation.

Flairs are computed from what a user has *received* (profile ratings and
profile comments) and are never stored. Rules, in order:

1. a self-rating earns ``ECHO_WARRIOR``;
2. the top-voted comment's text becomes a flair of its own;
3. a self-comment earns ``SHUKAR`` if it is the top comment, else ``DUBIOS``;
4. nothing above → ``FAN_NANE``.

When several comments share the top vote count, the first one in the given
order wins, so the result depends on the order the store returned them in.
"""

import logging
from typing import Any, List, Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ranker.models.user_comment import UserComment
from ranker.models.user_rating import UserRating

logger = logging.getLogger(__name__)

ECHO_WARRIOR = "Echo Warrior"
SHUKAR = "Shukar"
DUBIOS = "Dubios"
FAN_NANE = "Fan Nane"


def derive_flairs(
    user_id: int,
    received_ratings: Sequence[Any],
    received_comments: Sequence[Any],
) -> List[str]:
    """Derive the flair labels for ``user_id``; see the module docstring."""
    flairs: List[str] = []

    if any(r.rater_user_id == user_id for r in received_ratings):
        flairs.append(ECHO_WARRIOR)

    if received_comments:
        top_comment = max(received_comments, key=lambda c: c.votes)
        flairs.append(top_comment.content)

        if any(c.rater_user_id == user_id for c in received_comments):
            if top_comment.rater_user_id == user_id:
                flairs.append(SHUKAR)
            else:
                flairs.append(DUBIOS)

    if not flairs:
        flairs.append(FAN_NANE)

    return flairs


async def load_flairs(db: AsyncSession, user_id: int) -> List[str]:
    """Read everything ``user_id`` has received and derive their flairs."""
    ratings_res = await db.execute(
        select(UserRating).where(UserRating.rated_user_id == user_id)
    )
    comments_res = await db.execute(
        select(UserComment)
        .where(UserComment.rated_user_id == user_id)
        .order_by(desc(UserComment.votes))
    )
    flairs = derive_flairs(
        user_id, ratings_res.scalars().all(), comments_res.scalars().all()
    )
    logger.debug(f"Derived flairs for user {user_id}: {flairs}")
    return flairs
