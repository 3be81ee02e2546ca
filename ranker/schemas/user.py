"""User Pydantic schemas — registration, login, profile output."""

import re
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    """Fields submitted on the registration form."""
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8)
    profile_image: Optional[str] = None  # base64 or data URL

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one number")
        return v


class UserLogin(BaseModel):
    """Fields submitted on the login form."""
    email: EmailStr
    password: str


class UserSummary(BaseModel):
    """The slice of a user embedded in ratings, comments and activity."""
    id: int
    name: str
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class UserOut(BaseModel):
    """Public user representation returned by the API."""
    id: int
    name: str
    email: Optional[str] = None
    image: Optional[str] = None
    is_admin: bool = False

    model_config = {"from_attributes": True}


class AvatarOut(BaseModel):
    """Profile header data: rating summary plus derived flairs."""
    id: int
    name: str
    image: Optional[str] = None
    average_rating: Optional[float] = None
    rating_count: int = 0
    flairs: List[str]


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
