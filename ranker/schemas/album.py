"""Album, album rating and album comment Pydantic schemas."""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, field_validator

from ranker.models.comment import CommentStatus
from ranker.schemas.user import UserSummary

# Whole numbers 1..10 only; "8", 8.0 and true are all rejected.
Score = Annotated[int, Field(strict=True, ge=1, le=10)]


class AlbumCreate(BaseModel):
    spotify_id: str = Field(min_length=1)


class TrackOut(BaseModel):
    id: int
    name: str
    duration: int
    number: int

    model_config = {"from_attributes": True}


class RatingCreate(BaseModel):
    album_id: int
    score: Score


class RatingOut(BaseModel):
    id: int
    score: int
    user_id: int
    album_id: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class CommentCreate(BaseModel):
    album_id: int
    content: str

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment content is required")
        return v


class CommentOut(BaseModel):
    id: int
    content: str
    status: CommentStatus
    user_id: int
    album_id: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class AlbumOut(BaseModel):
    """Album list entry; ``average_rating`` is rounded for display."""
    id: int
    spotify_id: str
    name: str
    artist: str
    image_url: str = ""
    release_date: Optional[str] = None
    added_by_id: Optional[int] = None
    created_at: datetime
    ratings: List[RatingOut] = []
    rating_count: int = 0
    average_rating: Optional[float] = None


class AlbumDetailOut(AlbumOut):
    tracks: List[TrackOut] = []
    comments: List[CommentOut] = []


class TierAlbumOut(BaseModel):
    id: int
    name: str
    artist: str
    image_url: str = ""
    average_rating: float


class TierGroupOut(BaseModel):
    name: str
    min: float
    max: float
    color: str
    albums: List[TierAlbumOut]
