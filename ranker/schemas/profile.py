"""Schemas for what users leave on each other's profiles: ratings, comments, votes."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from ranker.models.user_comment import MAX_USER_COMMENT_LENGTH
from ranker.schemas.album import Score
from ranker.schemas.user import UserSummary


class UserRatingCreate(BaseModel):
    user_id: int
    score: Score


class UserRatingOut(BaseModel):
    id: int
    score: int
    rater_user_id: int
    rated_user_id: int
    created_at: datetime
    updated_at: datetime
    rater_user: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class UserRatingList(BaseModel):
    ratings: List[UserRatingOut]


class UserCommentCreate(BaseModel):
    user_id: int
    content: str

    @field_validator("content")
    @classmethod
    def short_and_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment content is required")
        if len(v) > MAX_USER_COMMENT_LENGTH:
            raise ValueError(
                f"Comment content must be {MAX_USER_COMMENT_LENGTH} characters or less"
            )
        return v


class UserCommentOut(BaseModel):
    id: int
    content: str
    votes: int
    rater_user_id: int
    rated_user_id: int
    created_at: datetime
    updated_at: datetime
    rater_user: Optional[UserSummary] = None
    upvoted_by: List[int] = []


class UserCommentList(BaseModel):
    comments: List[UserCommentOut]


class UpvoteRequest(BaseModel):
    remove: bool = False
