"""
Activity router — global and per-user timelines of album ratings and comments.

Endpoints:
    GET /activity?page=&limit=&type=all|ratings|comments
    GET /users/activity?userId=&page=&limit=&type=
    GET /users/activity/ratings?userId=
    GET /users/activity/comments?userId=
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ranker.config import settings
from ranker.database import get_db
from ranker.models.user import User
from ranker.routers.auth import get_current_user
from ranker.schemas.activity import ActivityPage
from ranker.services.activity import ActivityFilter, fetch_activity

router = APIRouter(tags=["activity"])

MAX_PAGE_SIZE = 100


async def _page(
    db: AsyncSession,
    kind: ActivityFilter,
    page: int,
    limit: int,
    user_id: Optional[int] = None,
    include_hidden: bool = False,
) -> dict:
    skip = (page - 1) * limit
    # One extra row tells us whether a next page exists.
    items = await fetch_activity(
        db, kind, skip=skip, take=limit + 1, user_id=user_id, include_hidden=include_hidden
    )
    return {
        "activities": [item.to_dict() for item in items[:limit]],
        "page": page,
        "limit": limit,
        "has_more": len(items) > limit,
    }


@router.get("/activity", response_model=ActivityPage)
async def global_activity(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ACTIVITY_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    type: ActivityFilter = ActivityFilter.ALL,
    db: AsyncSession = Depends(get_db),
):
    """Everyone's activity, newest first; hidden comments never appear."""
    return await _page(db, type, page, limit)


async def _user_activity(
    db: AsyncSession,
    user_id: int,
    kind: ActivityFilter,
    page: int,
    limit: int,
    current_user: Optional[User],
) -> dict:
    if not await db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    # Users see their own hidden comments on their own profile.
    is_owner = current_user is not None and current_user.id == user_id
    return await _page(db, kind, page, limit, user_id=user_id, include_hidden=is_owner)


@router.get("/users/activity", response_model=ActivityPage)
async def user_activity(
    user_id: int = Query(..., alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ACTIVITY_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    type: ActivityFilter = ActivityFilter.ALL,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _user_activity(db, user_id, type, page, limit, current_user)


@router.get("/users/activity/ratings", response_model=ActivityPage)
async def user_rating_activity(
    user_id: int = Query(..., alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ACTIVITY_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _user_activity(db, user_id, ActivityFilter.RATINGS, page, limit, current_user)


@router.get("/users/activity/comments", response_model=ActivityPage)
async def user_comment_activity(
    user_id: int = Query(..., alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ACTIVITY_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _user_activity(db, user_id, ActivityFilter.COMMENTS, page, limit, current_user)
