"""
Authentication router — credentials sign-up / sign-in + JWT cookie.

Endpoints:
    POST /auth/register  → create an account (optional Imgur-hosted avatar)
    POST /auth/login     → verify credentials, set JWT cookie, return token
    GET  /auth/logout    → clear JWT cookie
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from ranker.config import settings
from ranker.database import get_db
from ranker.errors import UpstreamError
from ranker.models.user import User
from ranker.schemas.user import Token, UserCreate, UserLogin, UserOut
from ranker.services.imgur import ImgurUploader, get_image_host

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

COOKIE_KEY = "access_token"


# ═══════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════

def create_access_token(data: dict) -> str:
    """Create a signed JWT with an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _set_auth_cookie(response: Response, token: str) -> Response:
    """Attach the JWT cookie to a response."""
    response.set_cookie(
        key=COOKIE_KEY,
        value=token,
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
    )
    return response


def _token_from_request(request: Request) -> Optional[str]:
    """Bearer header first, then the auth cookie."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(COOKIE_KEY)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Extract the JWT, decode it, and return the User.
    Returns None when no valid token is present (allows public endpoints).
    """
    token = _token_from_request(request)
    if not token:
        return None
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        user_id: int = int(payload.get("sub", 0))
        if not user_id:
            return None
    except (JWTError, ValueError):
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def require_user(
    current_user: Optional[User] = Depends(get_current_user),
) -> User:
    """Like ``get_current_user`` but rejects anonymous callers with 401."""
    if not current_user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return current_user


def can_moderate(user: User, owner_id: Optional[int]) -> bool:
    """Owners and admins may change or remove a resource."""
    return user.is_admin or (owner_id is not None and user.id == owner_id)


# ═══════════════════════════════════════════════════════════════
#  Registration
# ═══════════════════════════════════════════════════════════════

@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    image_host: ImgurUploader = Depends(get_image_host),
):
    """Create a credentials account; the avatar is uploaded before the user row exists."""
    email = body.email.lower()

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="User with this email already exists")

    result = await db.execute(select(User).where(User.name == body.name))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="User with this name already exists")

    image_url = None
    if body.profile_image:
        try:
            image_url = await image_host.upload(body.profile_image)
        except UpstreamError as e:
            raise HTTPException(
                status_code=502, detail=f"Image upload failed: {e.message}"
            )

    user = User(
        name=body.name,
        email=email,
        password_hash=generate_password_hash(body.password),
        image=image_url,
    )
    db.add(user)
    await db.commit()

    logger.info(f"Registered user {user.id} ({user.name})")
    return user


# ═══════════════════════════════════════════════════════════════
#  Login / logout
# ═══════════════════════════════════════════════════════════════

@router.post("/login", response_model=Token)
async def login(
    body: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Check credentials and hand back a JWT (also set as a cookie)."""
    result = await db.execute(select(User).where(User.email == body.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not user.password_hash or not check_password_hash(user.password_hash, body.password):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token({"sub": str(user.id)})
    _set_auth_cookie(response, token)
    return Token(access_token=token)


@router.get("/logout")
async def logout(response: Response):
    """Clear the auth cookie."""
    response.delete_cookie(key=COOKIE_KEY)
    return {"success": True}
