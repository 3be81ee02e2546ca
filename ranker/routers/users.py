"""Users router – profile lookup."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ranker.database import get_db
from ranker.models.user import User
from ranker.routers.auth import get_current_user
from ranker.schemas.user import UserOut, UserSummary

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
async def read_me(current_user: Optional[User] = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    if not current_user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return current_user


@router.get("/{user_id}", response_model=UserSummary)
async def read_user(user_id: int, db: AsyncSession = Depends(get_db)):
    """Get a public user profile by ID."""
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
